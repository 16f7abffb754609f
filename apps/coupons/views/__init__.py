"""
Coupon views module.

All views are exported from this module to maintain backward compatibility.
"""
from .coupon_views import validate_coupon, get_available_coupons, quote_discounts, redeem_coupons
from .admin_views import CouponAdminViewSet

__all__ = [
    'validate_coupon',
    'get_available_coupons',
    'quote_discounts',
    'redeem_coupons',
    'CouponAdminViewSet',
]
