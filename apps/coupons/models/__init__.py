"""
Coupon models module.

All models are exported from this module to maintain backward compatibility.
"""
from .coupon import Coupon
from .redemption import CouponRedemption

__all__ = [
    'Coupon',
    'CouponRedemption',
]
