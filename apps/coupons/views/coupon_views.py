"""
Shopper-facing coupon views: validation, discovery, quoting and redemption.
"""
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated

from apps.campaigns.models import Campaign
from apps.common.utils import success_response, error_response
from ..serializers import (
    CouponPublicSerializer, CouponRedemptionSerializer, ValidateCouponSerializer,
    QuoteRequestSerializer, RedeemRequestSerializer
)
from ..services import CouponService, DiscountStackingService


def _quote_from(data, user):
    campaign = None
    if data.get('campaign_id'):
        campaign = Campaign.objects.filter(pk=data['campaign_id']).first()
    return DiscountStackingService.quote(data['subtotal'], data['codes'], user=user, campaign=campaign)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def validate_coupon(request):
    """Check a single coupon code against a subtotal"""
    serializer = ValidateCouponSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response('Invalid input', serializer.errors)

    result = CouponService.validation_result(
        serializer.validated_data['code'],
        serializer.validated_data['subtotal'],
        user=request.user,
    )
    coupon = result['coupon']
    return success_response({
        'valid': result['valid'],
        'coupon': CouponPublicSerializer(coupon).data if coupon else None,
        'discountAmount': result['discount_amount'],
        'message': result['message'],
    }, result['message'])


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_available_coupons(request):
    coupons = CouponService.available(request.user)
    return success_response(CouponPublicSerializer(coupons, many=True).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def quote_discounts(request):
    """Work out the discount for a set of coupon codes without consuming them"""
    serializer = QuoteRequestSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response('Invalid input', serializer.errors)

    quote = _quote_from(serializer.validated_data, request.user)
    return success_response(quote.to_dict())


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def redeem_coupons(request):
    """Apply coupon codes to an order, consuming their usage"""
    serializer = RedeemRequestSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response('Invalid input', serializer.errors)

    quote = _quote_from(serializer.validated_data, request.user)
    redemptions = DiscountStackingService.redeem(quote, request.user, serializer.validated_data['order_id'])
    data = quote.to_dict()
    data['redemptions'] = CouponRedemptionSerializer(redemptions, many=True).data
    return success_response(data, 'Coupons redeemed successfully')
