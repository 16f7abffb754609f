"""
Loyalty views module.

All views are exported from this module to maintain backward compatibility.
"""
from .member_views import get_loyalty_profile, update_preferences, get_tier_info, get_leaderboard
from .points_views import get_points_history, redeem_points, process_order
from .spin_views import get_spin_eligibility, spin_wheel, get_spin_history
from .admin_views import list_members, award_points, loyalty_analytics

__all__ = [
    'get_loyalty_profile',
    'update_preferences',
    'get_tier_info',
    'get_leaderboard',
    'get_points_history',
    'redeem_points',
    'process_order',
    'get_spin_eligibility',
    'spin_wheel',
    'get_spin_history',
    'list_members',
    'award_points',
    'loyalty_analytics',
]
