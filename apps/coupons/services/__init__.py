"""
Coupon services module.

All services are exported from this module to maintain backward compatibility.
"""
from .discounts import DiscountLine, DiscountQuote
from .coupon_service import CouponService
from .stacking_service import DiscountStackingService

__all__ = [
    'DiscountLine',
    'DiscountQuote',
    'CouponService',
    'DiscountStackingService',
]
