from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Sum
from django.utils import timezone

MAX_TOTAL_PROBABILITY = Decimal('100')


class SpinWheel(models.Model):
    """A wheel of weighted reward segments"""
    name = models.CharField(max_length=100)
    title = models.CharField(max_length=100, default='Spin & Win!')
    description = models.TextField(blank=True)
    campaign = models.ForeignKey(
        'campaigns.Campaign', on_delete=models.SET_NULL, null=True, blank=True, related_name='spin_wheels'
    )
    is_active = models.BooleanField(default=True)
    max_spins_per_user = models.PositiveIntegerField(null=True, blank=True)  # None means unlimited
    cooldown_hours = models.PositiveIntegerField(default=0)
    start_date = models.DateTimeField(null=True, blank=True)
    end_date = models.DateTimeField(null=True, blank=True)

    # Analytics
    total_spins = models.PositiveIntegerField(default=0)
    rewards_given = models.PositiveIntegerField(default=0)
    conversions = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'spin_wheels'
        ordering = ['-created_at']

    def __str__(self):
        return self.name

    def total_probability(self):
        return self.segments.aggregate(total=Sum('probability'))['total'] or Decimal('0')

    def clean(self):
        if self.start_date and self.end_date and self.start_date >= self.end_date:
            raise ValidationError({'end_date': 'End date must be after start date'})
        if self.pk and self.total_probability() > MAX_TOTAL_PROBABILITY:
            raise ValidationError('Segment probabilities must not add up to more than 100')

    def is_available(self, now=None):
        now = now or timezone.now()
        if not self.is_active:
            return False
        if self.start_date and now < self.start_date:
            return False
        if self.end_date and now >= self.end_date:
            return False
        if self.campaign_id and not self.campaign.is_running(now):
            return False
        return True


class SpinSegment(models.Model):
    """One slice of a wheel"""
    REWARD_TYPES = [
        ('discount', 'Percentage Discount'),
        ('free_shipping', 'Free Shipping'),
        ('cashback', 'Cashback'),
        ('loyalty_points', 'Loyalty Points'),
        ('product', 'Free Product'),
        ('no_win', 'No Win'),
    ]

    wheel = models.ForeignKey('SpinWheel', on_delete=models.CASCADE, related_name='segments')
    name = models.CharField(max_length=50)
    reward_type = models.CharField(max_length=20, choices=REWARD_TYPES)
    value = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    probability = models.DecimalField(
        max_digits=5, decimal_places=2,
        validators=[MinValueValidator(0), MaxValueValidator(100)]
    )
    color = models.CharField(max_length=7, default='#FF6B6B')
    icon = models.CharField(max_length=50, blank=True)
    position = models.PositiveSmallIntegerField(default=0)

    class Meta:
        db_table = 'spin_segments'
        ordering = ['position', 'id']

    def __str__(self):
        return f"{self.name} ({self.probability}%)"

    @property
    def is_no_win(self):
        return self.reward_type == 'no_win'

    @property
    def reward_label(self):
        if self.reward_type == 'discount':
            percent = int(self.value) if self.value == self.value.to_integral_value() else self.value
            return f'{percent}% off'
        if self.reward_type == 'loyalty_points':
            return f'{int(self.value)} points'
        if self.reward_type == 'cashback':
            return f'{self.value} cashback'
        return self.get_reward_type_display()
