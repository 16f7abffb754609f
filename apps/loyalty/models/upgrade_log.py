from django.db import models


class TierUpgradeLog(models.Model):
    """History of tier changes"""
    member = models.ForeignKey('LoyaltyMember', on_delete=models.CASCADE, related_name='tier_history')
    from_tier = models.ForeignKey('LoyaltyTier', on_delete=models.CASCADE, related_name='upgrades_from', null=True)
    to_tier = models.ForeignKey('LoyaltyTier', on_delete=models.CASCADE, related_name='upgrades_to')
    points_at_change = models.IntegerField(default=0)
    spent_at_change = models.DecimalField(max_digits=12, decimal_places=2, null=True)
    reason = models.CharField(max_length=200)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'loyalty_tier_upgrade_logs'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.member.user.username}: {self.from_tier} -> {self.to_tier}"
