"""
Admin loyalty views: member listing, manual awards and analytics.
"""
from django.contrib.auth import get_user_model
from django.db.models import Q
from rest_framework.decorators import api_view, permission_classes

from apps.common.permissions import IsAdminRole
from apps.common.utils import success_response, error_response, paginated_response
from ..models import LoyaltyMember
from ..serializers import AwardPointsSerializer, LoyaltyMemberListSerializer, PointsTransactionListSerializer
from ..services import LoyaltyService

User = get_user_model()


@api_view(['GET'])
@permission_classes([IsAdminRole])
def list_members(request):
    """List loyalty members with optional tier filter and search"""
    members = LoyaltyMember.objects.select_related('user', 'tier').order_by('-lifetime_points')

    tier = request.GET.get('tier')
    if tier:
        members = members.filter(tier__name=tier)

    search = request.GET.get('search')
    if search:
        members = members.filter(
            Q(user__username__icontains=search) | Q(user__email__icontains=search)
        )

    return paginated_response(members, LoyaltyMemberListSerializer, request)


@api_view(['POST'])
@permission_classes([IsAdminRole])
def award_points(request):
    """Manually grant bonus points to a member"""
    serializer = AwardPointsSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response('Invalid input', serializer.errors)

    data = serializer.validated_data
    user = User.objects.filter(id=data['user_id']).first()
    if user is None:
        return error_response('User not found', status_code=404)

    campaign = None
    if data.get('campaign_id'):
        from apps.campaigns.models import Campaign
        campaign = Campaign.objects.filter(id=data['campaign_id']).first()

    points_transaction = LoyaltyService.award_bonus_points(
        user,
        data['points'],
        data['reason'],
        campaign=campaign,
        transaction_type=data['transaction_type'],
        reference_id=f'admin_{request.user.id}',
    )
    return success_response(PointsTransactionListSerializer(points_transaction).data, 'Points awarded successfully')


@api_view(['GET'])
@permission_classes([IsAdminRole])
def loyalty_analytics(request):
    """Program-wide loyalty statistics"""
    try:
        days = int(request.GET.get('days', 30))
    except ValueError:
        return error_response('days must be an integer')
    return success_response(LoyaltyService.get_analytics(days))
