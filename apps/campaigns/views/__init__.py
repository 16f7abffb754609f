"""
Campaign views module.

All views are exported from this module to maintain backward compatibility.
"""
from .promotion_views import (
    get_active_promotions, get_personalized_promotions, get_campaign_detail,
    check_campaign_eligibility, track_campaign_event
)
from .admin_views import CampaignAdminViewSet

__all__ = [
    'get_active_promotions',
    'get_personalized_promotions',
    'get_campaign_detail',
    'check_campaign_eligibility',
    'track_campaign_event',
    'CampaignAdminViewSet',
]
