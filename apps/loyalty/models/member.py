from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone

from apps.common.exceptions import InsufficientPointsError, SpinError
from apps.common.utils import to_decimal


class LoyaltyMember(models.Model):
    """User's loyalty membership: tier, points balance and spin allowance"""
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='loyalty_member')
    tier = models.ForeignKey('LoyaltyTier', on_delete=models.PROTECT, related_name='members')
    points = models.IntegerField(default=0, validators=[MinValueValidator(0)])  # Spendable balance
    lifetime_points = models.IntegerField(default=0)  # Total points ever earned, drives tier
    total_spent = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    orders_count = models.IntegerField(default=0)
    tier_updated_at = models.DateTimeField(null=True, blank=True)

    # Spin wheel allowance
    available_spins = models.PositiveIntegerField(default=0)  # Bonus spins on top of the daily free spin
    total_spins = models.PositiveIntegerField(default=0)
    last_spin_date = models.DateField(null=True, blank=True)
    daily_spins_used = models.PositiveSmallIntegerField(default=0)
    spin_tokens_awarded = models.PositiveIntegerField(default=0)

    # Preferences
    email_notifications = models.BooleanField(default=True)
    sms_notifications = models.BooleanField(default=False)
    birthday_month = models.PositiveSmallIntegerField(
        null=True, blank=True, validators=[MinValueValidator(1), MaxValueValidator(12)]
    )
    birthday_day = models.PositiveSmallIntegerField(
        null=True, blank=True, validators=[MinValueValidator(1), MaxValueValidator(31)]
    )

    joined_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'loyalty_members'

    def __str__(self):
        return f"{self.user.username} - {self.tier.display_name} ({self.points} pts)"

    def add_points(self, amount, transaction_type, description="", reference_id=None, campaign=None):
        """Add points to the balance and record the transaction. Caller saves."""
        if amount <= 0:
            raise ValueError("Points amount must be positive")

        self.points += amount
        self.lifetime_points += amount

        from .transaction import PointsTransaction
        return PointsTransaction(
            member=self,
            transaction_type=transaction_type,
            amount=amount,
            balance_after=self.points,
            description=description,
            reference_id=reference_id,
            campaign=campaign,
        )

    def redeem_points(self, amount, description="", reference_id=None):
        """Deduct points from the balance. Caller saves."""
        if amount <= 0:
            raise ValueError("Redemption amount must be positive")
        if amount > self.points:
            raise InsufficientPointsError()

        self.points -= amount

        from .transaction import PointsTransaction
        return PointsTransaction(
            member=self,
            transaction_type='redeemed',
            amount=-amount,
            balance_after=self.points,
            description=description,
            reference_id=reference_id,
        )

    def award_spin_tokens(self, points_threshold):
        """Grant one bonus spin per threshold of lifetime points not yet converted"""
        if points_threshold <= 0:
            return 0
        earned = self.lifetime_points // points_threshold
        tokens = earned - self.spin_tokens_awarded
        if tokens > 0:
            self.available_spins += tokens
            self.spin_tokens_awarded = earned
            return tokens
        return 0

    def refresh_tier(self, reason):
        """
        Move the member up to the tier their lifetime points and spend qualify for.

        Tiers only go up. Returns the TierUpgradeLog when the tier changed.
        """
        from .tier import LoyaltyTier
        from .upgrade_log import TierUpgradeLog

        qualified = LoyaltyTier.resolve_for(self.lifetime_points, to_decimal(self.total_spent))
        if qualified is None or qualified.level <= self.tier.level:
            return None

        old_tier = self.tier
        self.tier = qualified
        self.tier_updated_at = timezone.now()
        return TierUpgradeLog(
            member=self,
            from_tier=old_tier,
            to_tier=qualified,
            points_at_change=self.lifetime_points,
            spent_at_change=self.total_spent,
            reason=reason,
        )

    def award_badge(self, badge):
        """Give the member `badge` once. Returns True when it was newly earned."""
        from .badge import MemberBadge
        _, created = MemberBadge.objects.get_or_create(member=self, badge=badge)
        return created

    def has_daily_spin(self, today, daily_free_spins):
        if self.last_spin_date != today:
            return daily_free_spins > 0
        return self.daily_spins_used < daily_free_spins

    def can_spin(self, today, daily_free_spins):
        return self.has_daily_spin(today, daily_free_spins) or self.available_spins > 0

    def consume_spin(self, today, daily_free_spins):
        """Use the daily free spin if one is left, otherwise a bonus spin. Caller saves."""
        if self.last_spin_date != today:
            self.daily_spins_used = 0
        if self.daily_spins_used < daily_free_spins:
            self.daily_spins_used += 1
        elif self.available_spins > 0:
            self.available_spins -= 1
        else:
            raise SpinError('No spins available today')
        self.last_spin_date = today
        self.total_spins += 1

    def get_tier_benefits(self):
        return {
            'discount_percentage': self.tier.discount_percentage,
            'points_multiplier': self.tier.points_multiplier,
            'spin_multiplier': self.tier.spin_multiplier,
            **self.tier.benefits,
        }

    @classmethod
    def create_for_user(cls, user):
        """Create a membership at the entry tier"""
        from .tier import LoyaltyTier
        entry_tier = LoyaltyTier.get_entry_tier()
        if not entry_tier:
            raise ValueError("No loyalty tiers configured. Please run setup_loyalty_tiers command.")
        return cls.objects.create(user=user, tier=entry_tier)
