"""
Coupon serializers module.

All serializers are exported from this module to maintain backward compatibility.
"""
from .coupon_serializers import (
    CouponPublicSerializer, CouponSerializer, CouponRedemptionSerializer,
    ValidateCouponSerializer, QuoteRequestSerializer, RedeemRequestSerializer
)

__all__ = [
    'CouponPublicSerializer',
    'CouponSerializer',
    'CouponRedemptionSerializer',
    'ValidateCouponSerializer',
    'QuoteRequestSerializer',
    'RedeemRequestSerializer',
]
