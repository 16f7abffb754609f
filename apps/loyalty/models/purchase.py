from django.db import models


class PurchaseRecord(models.Model):
    """Orders already credited to a member, one row per order"""
    member = models.ForeignKey('LoyaltyMember', on_delete=models.CASCADE, related_name='purchases')
    order_id = models.CharField(max_length=100)
    subtotal = models.DecimalField(max_digits=12, decimal_places=2)
    points_earned = models.IntegerField(default=0)
    tier_multiplier = models.DecimalField(max_digits=4, decimal_places=2)
    boost_multiplier = models.DecimalField(max_digits=4, decimal_places=2, default=1)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'loyalty_purchase_records'
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(fields=['member', 'order_id'], name='unique_member_order'),
        ]

    def __str__(self):
        return f"Order {self.order_id}: {self.points_earned} pts"
