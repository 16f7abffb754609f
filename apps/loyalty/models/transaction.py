from django.db import models


class PointsTransaction(models.Model):
    """Individual points ledger entries"""
    TRANSACTION_TYPES = [
        ('earned', 'Points Earned'),
        ('redeemed', 'Points Redeemed'),
        ('bonus', 'Bonus Points'),
        ('adjustment', 'Manual Adjustment'),
    ]

    member = models.ForeignKey('LoyaltyMember', on_delete=models.CASCADE, related_name='transactions')
    transaction_type = models.CharField(max_length=20, choices=TRANSACTION_TYPES)
    amount = models.IntegerField()  # Positive for earning, negative for redemption
    balance_after = models.IntegerField()
    description = models.CharField(max_length=200, blank=True)
    reference_id = models.CharField(max_length=100, blank=True, null=True)  # Order ID, spin ID, etc.
    campaign = models.ForeignKey(
        'campaigns.Campaign', on_delete=models.SET_NULL, null=True, blank=True, related_name='points_transactions'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'loyalty_points_transactions'
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"{self.member.user.username} - {self.amount} points ({self.get_transaction_type_display()})"

    @property
    def is_earning(self):
        return self.amount > 0
