from django.db import models


class LoyaltyTier(models.Model):
    """Loyalty tier definitions"""
    TIER_CHOICES = [
        ('bronze', 'Bronze'),
        ('silver', 'Silver'),
        ('gold', 'Gold'),
        ('platinum', 'Platinum'),
        ('diamond', 'Diamond'),
    ]

    name = models.CharField(max_length=20, choices=TIER_CHOICES, unique=True)
    display_name = models.CharField(max_length=50)
    level = models.PositiveSmallIntegerField(unique=True, help_text="Rank, 1 is the entry tier")
    min_points = models.IntegerField(default=0)
    min_spending = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    points_multiplier = models.DecimalField(max_digits=4, decimal_places=2, default=1)
    discount_percentage = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    spin_multiplier = models.PositiveSmallIntegerField(default=1)
    benefits = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'loyalty_tiers'
        ordering = ['level']

    def __str__(self):
        return self.display_name

    def qualifies(self, points, spending):
        """Both the points and the spending threshold must be met"""
        return points >= self.min_points and spending >= self.min_spending

    def next_tier(self):
        return LoyaltyTier.objects.filter(level__gt=self.level).order_by('level').first()

    @classmethod
    def get_entry_tier(cls):
        """Get the lowest tier, assigned to new members"""
        return cls.objects.order_by('level').first()

    @classmethod
    def resolve_for(cls, points, spending):
        """Get the highest tier whose points and spending thresholds are both met"""
        from ..services.accrual import TierPointsCalculator
        return TierPointsCalculator.resolve_tier(cls.objects.all(), points, spending)
