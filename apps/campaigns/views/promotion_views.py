"""
Shopper-facing promotion views.
"""
import logging
from decimal import Decimal, InvalidOperation

from django.shortcuts import get_object_or_404
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated

from apps.common.utils import success_response, error_response
from apps.coupons.serializers import CouponPublicSerializer
from ..models import Campaign
from ..serializers import CampaignPublicSerializer, TrackEventSerializer
from ..services import CampaignService

logger = logging.getLogger(__name__)


def _cart_value(request):
    try:
        value = Decimal(request.GET.get('cart_value', '0'))
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


@api_view(['GET'])
@permission_classes([AllowAny])
def get_active_promotions(request):
    """List campaigns that are live right now"""
    campaigns = CampaignService.active_campaigns()
    return success_response(CampaignPublicSerializer(campaigns, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_personalized_promotions(request):
    """Campaigns the current user qualifies for, with their mini-coupons"""
    cart_value = _cart_value(request)
    if cart_value is None:
        return error_response('Invalid cart_value format')

    campaigns = CampaignService.eligible_campaigns(
        request.user, cart_value=cart_value, device=request.GET.get('device')
    )
    data = []
    for campaign in campaigns:
        item = CampaignPublicSerializer(campaign).data
        coupons = campaign.coupons.filter(is_active=True, generated_for__isnull=True)
        item['mini_coupons'] = CouponPublicSerializer(coupons, many=True).data
        data.append(item)

    return success_response({
        'campaigns': data,
        'loyalty_boost': CampaignService.loyalty_boost_for(request.user),
    })


@api_view(['GET'])
@permission_classes([AllowAny])
def get_campaign_detail(request, campaign_id):
    campaign = get_object_or_404(Campaign.objects.exclude(status='draft'), pk=campaign_id)
    return success_response(CampaignPublicSerializer(campaign).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def check_campaign_eligibility(request, campaign_id):
    """Explain whether the current user qualifies for a campaign"""
    campaign = get_object_or_404(Campaign, pk=campaign_id)
    cart_value = _cart_value(request)
    if cart_value is None:
        return error_response('Invalid cart_value format')

    result = CampaignService.check_eligibility(
        campaign, request.user, cart_value=cart_value, device=request.GET.get('device')
    )
    return success_response(result.to_dict())


@api_view(['POST'])
@permission_classes([AllowAny])
def track_campaign_event(request, campaign_id):
    """Record a view, click, conversion or component interaction"""
    get_object_or_404(Campaign, pk=campaign_id)
    serializer = TrackEventSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response('Invalid tracking event', serializer.errors)

    data = serializer.validated_data
    campaign = CampaignService.track(campaign_id, data['metric'], data['value'], data.get('component'))
    return success_response({'performance': campaign.performance}, 'Event tracked')
