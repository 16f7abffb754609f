from django.conf import settings
from django.db import models


class CouponRedemption(models.Model):
    """A coupon applied to an order"""
    coupon = models.ForeignKey('Coupon', on_delete=models.CASCADE, related_name='redemptions')
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='coupon_redemptions')
    order_id = models.CharField(max_length=100)
    discount_amount = models.DecimalField(max_digits=12, decimal_places=2)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'coupon_redemptions'
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(fields=['coupon', 'order_id'], name='unique_coupon_order'),
        ]

    def __str__(self):
        return f"{self.coupon.code} on order {self.order_id}"
