from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone


def default_performance():
    return {
        'views': 0,
        'clicks': 0,
        'conversions': 0,
        'revenue': '0.00',
        'banners': {'impressions': 0, 'clicks': 0},
        'mini_coupons': {'issued': 0, 'redeemed': 0},
        'spin_wheel': {'spins': 0, 'rewards': 0},
    }


class Campaign(models.Model):
    """Time-boxed promotional event bundling banners, mini-coupons and spin wheels"""
    TYPE_CHOICES = [
        ('flash_sale', 'Flash Sale'),
        ('seasonal', 'Seasonal'),
        ('loyalty_boost', 'Loyalty Boost'),
        ('holiday', 'Holiday'),
        ('promotional', 'Promotional'),
        ('welcome', 'Welcome'),
        ('custom', 'Custom'),
    ]

    STATUS_CHOICES = [
        ('draft', 'Draft'),
        ('scheduled', 'Scheduled'),
        ('active', 'Active'),
        ('paused', 'Paused'),
        ('completed', 'Completed'),
    ]

    AUDIENCE_CHOICES = [
        ('all', 'All Users'),
        ('new_users', 'New Users'),
        ('returning_users', 'Returning Users'),
        ('vip', 'VIP Members'),
        ('custom', 'Custom Rules'),
    ]

    # Statuses in which a campaign is live while inside its window
    LIVE_STATUSES = ('scheduled', 'active')

    name = models.CharField(max_length=100)
    description = models.TextField(blank=True)
    campaign_type = models.CharField(max_length=20, choices=TYPE_CHOICES, default='promotional')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='draft')
    start_date = models.DateTimeField()
    end_date = models.DateTimeField()
    priority = models.PositiveSmallIntegerField(
        default=1, validators=[MinValueValidator(1), MaxValueValidator(10)]
    )
    target_audience = models.CharField(max_length=20, choices=AUDIENCE_CHOICES, default='all')
    eligibility_rules = models.JSONField(default=dict, blank=True)

    # Stacking rules
    allow_multiple_coupons = models.BooleanField(default=False)
    max_discount_percentage = models.DecimalField(
        max_digits=5, decimal_places=2, default=50,
        validators=[MinValueValidator(0), MaxValueValidator(100)]
    )

    # Loyalty boost factor applied to accrual while the campaign runs
    points_multiplier = models.DecimalField(
        max_digits=4, decimal_places=2, default=1, validators=[MinValueValidator(1)]
    )

    banners = models.JSONField(default=list, blank=True)
    performance = models.JSONField(default=default_performance, blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='campaigns'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'campaigns'
        ordering = ['-priority', 'start_date']
        indexes = [
            models.Index(fields=['status', 'start_date', 'end_date']),
        ]

    def __str__(self):
        return f"{self.name} ({self.get_status_display()})"

    def clean(self):
        if self.start_date and self.end_date and self.start_date >= self.end_date:
            raise ValidationError({'end_date': 'End date must be after start date'})
        if isinstance(self.eligibility_rules, dict):
            from ..services.eligibility import EligibilityEvaluator
            errors = EligibilityEvaluator.rule_errors(self.eligibility_rules)
            if errors:
                raise ValidationError({'eligibility_rules': list(errors.values())})

    def is_running(self, now=None):
        now = now or timezone.now()
        return self.status in self.LIVE_STATUSES and self.start_date <= now < self.end_date

    def record_history(self, action, actor=None, details=None):
        from .history import CampaignHistory
        return CampaignHistory.objects.create(
            campaign=self,
            action=action,
            actor=actor if actor is not None and actor.is_authenticated else None,
            details=details or {},
        )
