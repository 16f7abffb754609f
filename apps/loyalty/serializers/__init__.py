"""
Loyalty serializers module.

All serializers are exported from this module to maintain backward compatibility.
"""
from .tier_serializers import LoyaltyTierSerializer, TierUpgradeLogSerializer
from .badge_serializers import MemberBadgeSerializer, LeaderboardEntrySerializer
from .member_serializers import (
    LoyaltyMemberListSerializer, LoyaltyMemberSerializer, LoyaltyPreferencesSerializer
)
from .transaction_serializers import (
    PointsTransactionListSerializer, ProcessOrderSerializer,
    RedeemPointsSerializer, AwardPointsSerializer
)

__all__ = [
    'LoyaltyTierSerializer',
    'TierUpgradeLogSerializer',
    'MemberBadgeSerializer',
    'LeaderboardEntrySerializer',
    'LoyaltyMemberListSerializer',
    'LoyaltyMemberSerializer',
    'LoyaltyPreferencesSerializer',
    'PointsTransactionListSerializer',
    'ProcessOrderSerializer',
    'RedeemPointsSerializer',
    'AwardPointsSerializer',
]
