"""
Loyalty profile, preferences and tier views.
"""
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated

from apps.common.utils import success_response, error_response
from ..serializers import (
    LeaderboardEntrySerializer, LoyaltyMemberSerializer, LoyaltyPreferencesSerializer,
    LoyaltyTierSerializer, TierUpgradeLogSerializer
)
from ..services import LoyaltyService

MAX_LEADERBOARD_SIZE = 50


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_loyalty_profile(request):
    """Get the current user's loyalty profile with tier progress"""
    member = LoyaltyService.get_or_create_member(request.user)
    data = LoyaltyMemberSerializer(member).data
    data['tier_progress'] = LoyaltyService.tier_progress(member)
    data['benefits'] = member.get_tier_benefits()
    return success_response(data)


@api_view(['PUT', 'PATCH'])
@permission_classes([IsAuthenticated])
def update_preferences(request):
    """Update loyalty notification and birthday preferences"""
    member = LoyaltyService.get_or_create_member(request.user)
    serializer = LoyaltyPreferencesSerializer(member, data=request.data, partial=True)
    if not serializer.is_valid():
        return error_response('Invalid preferences', serializer.errors)
    serializer.save()
    return success_response(LoyaltyMemberSerializer(member).data, 'Preferences updated successfully')


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_tier_info(request):
    """Get current tier, next tier requirements and upgrade history"""
    member = LoyaltyService.get_or_create_member(request.user)
    history = member.tier_history.select_related('from_tier', 'to_tier')[:10]
    return success_response({
        'tier': LoyaltyTierSerializer(member.tier).data,
        'progress': LoyaltyService.tier_progress(member),
        'history': TierUpgradeLogSerializer(history, many=True).data,
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_leaderboard(request):
    """Top members by lifetime points"""
    try:
        limit = int(request.GET.get('limit', 10))
    except ValueError:
        return error_response('limit must be an integer')
    limit = min(max(limit, 1), MAX_LEADERBOARD_SIZE)

    entries = LeaderboardEntrySerializer(LoyaltyService.leaderboard(limit), many=True).data
    return success_response([
        {'rank': rank, **entry} for rank, entry in enumerate(entries, start=1)
    ])
