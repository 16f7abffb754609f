import string
from datetime import timedelta
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from django.utils.crypto import get_random_string

from apps.common.utils import round_money, to_decimal


class Coupon(models.Model):
    """Discount code, either general or scoped to a campaign (mini-coupon)"""
    TYPE_CHOICES = [
        ('percentage', 'Percentage'),
        ('fixed', 'Fixed Amount'),
        ('free_shipping', 'Free Shipping'),
    ]

    EVENT_TYPE_CHOICES = [
        ('welcome', 'Welcome'),
        ('seasonal', 'Seasonal'),
        ('flash', 'Flash Sale'),
        ('loyalty', 'Loyalty'),
        ('spin', 'Spin Wheel'),
        ('recovery', 'Cart Recovery'),
        ('custom', 'Custom'),
    ]

    code = models.CharField(max_length=50, unique=True)  # Stored uppercase
    name = models.CharField(max_length=100)
    description = models.TextField(blank=True)
    coupon_type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    value = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    minimum_order_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    maximum_discount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    valid_from = models.DateTimeField()
    valid_until = models.DateTimeField()
    usage_limit = models.PositiveIntegerField(null=True, blank=True)  # None means unlimited
    usage_count = models.PositiveIntegerField(default=0)
    per_user_limit = models.PositiveIntegerField(default=1)
    is_active = models.BooleanField(default=True)

    campaign = models.ForeignKey(
        'campaigns.Campaign', on_delete=models.CASCADE, null=True, blank=True, related_name='coupons'
    )
    is_spin_generated = models.BooleanField(default=False)
    generated_for = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, null=True, blank=True, related_name='personal_coupons'
    )
    event_type = models.CharField(max_length=20, choices=EVENT_TYPE_CHOICES, default='custom')

    # Display
    display_color = models.CharField(max_length=7, default='#6C7A59')
    display_icon = models.CharField(max_length=50, blank=True)
    display_message = models.CharField(max_length=200, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'coupons'
        ordering = ['valid_until']
        indexes = [
            models.Index(fields=['is_active', 'valid_until']),
            models.Index(fields=['event_type']),
        ]

    def __str__(self):
        return f"{self.code} ({self.get_coupon_type_display()})"

    def save(self, *args, **kwargs):
        self.code = self.code.strip().upper()
        super().save(*args, **kwargs)

    def clean(self):
        if self.valid_from and self.valid_until and self.valid_from >= self.valid_until:
            raise ValidationError({'valid_until': 'Expiry must be after the start date'})
        if self.coupon_type == 'percentage' and self.value is not None and self.value > 100:
            raise ValidationError({'value': 'Percentage discount cannot exceed 100'})

    @property
    def is_mini_coupon(self):
        return self.campaign_id is not None

    @property
    def is_exhausted(self):
        return self.usage_limit is not None and self.usage_count >= self.usage_limit

    def is_valid(self, now=None):
        now = now or timezone.now()
        return self.is_active and self.valid_from <= now <= self.valid_until and not self.is_exhausted

    def calculate_discount(self, subtotal):
        """Discount this coupon gives on `subtotal`, rounded to 2 places"""
        subtotal = to_decimal(subtotal)
        if subtotal <= 0 or subtotal < self.minimum_order_amount:
            return Decimal('0.00')

        if self.coupon_type == 'percentage':
            discount = subtotal * to_decimal(self.value) / 100
            if self.maximum_discount is not None:
                discount = min(discount, to_decimal(self.maximum_discount))
        elif self.coupon_type == 'fixed':
            discount = min(to_decimal(self.value), subtotal)
        else:
            # Free shipping is applied at checkout, not against the subtotal
            discount = Decimal('0')

        return round_money(discount)

    @classmethod
    def generate_code(cls, prefix='SPIN'):
        while True:
            stamp = timezone.now().strftime('%y%m%d%H%M%S')
            code = f'{prefix}{stamp}{get_random_string(4, string.ascii_uppercase + string.digits)}'
            if not cls.objects.filter(code=code).exists():
                return code

    @classmethod
    def generate_spin_coupon(cls, user, reward_type, value):
        """
        Issue a personal single-use coupon for a spin wheel prize.

        The coupon has no campaign; it stays valid after the wheel's campaign ends.
        """
        promotions = settings.PROMOTIONS
        now = timezone.now()
        value = to_decimal(value)

        if reward_type == 'free_shipping':
            coupon_type = 'free_shipping'
            name = 'Lucky Spin Reward - Free Shipping'
            message = 'You won free shipping on your next order!'
        else:
            coupon_type = 'percentage'
            name = f'Lucky Spin Reward - {value.normalize():f}% Off'
            message = f'You won {value.normalize():f}% off! Use it wisely!'

        return cls.objects.create(
            code=cls.generate_code(),
            name=name,
            description='Congratulations! You won this coupon from your lucky spin!',
            coupon_type=coupon_type,
            value=value if coupon_type == 'percentage' else Decimal('0'),
            minimum_order_amount=promotions['SPIN_COUPON_MIN_ORDER'],
            maximum_discount=promotions['SPIN_COUPON_MAX_DISCOUNT'] if coupon_type == 'percentage' else None,
            valid_from=now,
            valid_until=now + timedelta(days=promotions['SPIN_COUPON_VALID_DAYS']),
            usage_limit=1,
            per_user_limit=1,
            is_spin_generated=True,
            generated_for=user,
            event_type='spin',
            display_color='#FF6B6B',
            display_message=message,
        )
