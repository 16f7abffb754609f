"""
Loyalty models module.

All models are exported from this module to maintain backward compatibility.
"""
from .tier import LoyaltyTier
from .member import LoyaltyMember
from .transaction import PointsTransaction
from .purchase import PurchaseRecord
from .upgrade_log import TierUpgradeLog
from .badge import Badge, MemberBadge

__all__ = [
    'LoyaltyTier',
    'LoyaltyMember',
    'PointsTransaction',
    'PurchaseRecord',
    'TierUpgradeLog',
    'Badge',
    'MemberBadge',
]
