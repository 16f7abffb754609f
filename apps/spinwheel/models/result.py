from django.db import models


class SpinResult(models.Model):
    """Reward-issued event, one row per spin"""
    member = models.ForeignKey('loyalty.LoyaltyMember', on_delete=models.CASCADE, related_name='spin_results')
    wheel = models.ForeignKey('SpinWheel', on_delete=models.CASCADE, related_name='results')
    segment = models.ForeignKey('SpinSegment', on_delete=models.SET_NULL, null=True, blank=True, related_name='results')
    reward_type = models.CharField(max_length=20, default='no_win')
    reward_value = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    coupon = models.ForeignKey(
        'coupons.Coupon', on_delete=models.SET_NULL, null=True, blank=True, related_name='spin_results'
    )
    redeemed = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'spin_results'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['member', 'wheel', 'created_at']),
        ]

    def __str__(self):
        return f"{self.member.user.username}: {self.reward_label}"

    @property
    def is_no_win(self):
        return self.reward_type == 'no_win'

    @property
    def reward_label(self):
        if self.is_no_win or self.segment is None:
            return 'No win'
        return self.segment.reward_label
