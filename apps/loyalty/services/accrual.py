"""
Points and tier arithmetic.

Kept free of database access so the rules can be checked against plain
objects carrying the tier attributes.
"""
from decimal import Decimal, ROUND_FLOOR

from apps.common.utils import to_decimal


class TierPointsCalculator:
    """Calculate accrual, tier qualification and progress"""

    @staticmethod
    def base_points(subtotal, divisor):
        """One base point per whole `divisor` of currency spent"""
        subtotal = to_decimal(subtotal)
        if subtotal <= 0 or divisor <= 0:
            return 0
        return int((subtotal / to_decimal(divisor)).to_integral_value(rounding=ROUND_FLOOR))

    @classmethod
    def order_points(cls, subtotal, multiplier, divisor, boost=1):
        """floor(floor(subtotal / divisor) x multiplier x boost)"""
        base = cls.base_points(subtotal, divisor)
        if base == 0:
            return 0
        earned = Decimal(base) * to_decimal(multiplier) * to_decimal(boost)
        return int(earned.to_integral_value(rounding=ROUND_FLOOR))

    @staticmethod
    def resolve_tier(tiers, points, spending):
        """
        Get the highest tier whose points and spending thresholds are both met.

        Falls back to the lowest tier, or None when no tiers exist.
        """
        ordered = sorted(tiers, key=lambda tier: tier.level)
        if not ordered:
            return None
        spending = to_decimal(spending)
        for tier in reversed(ordered):
            if points >= tier.min_points and spending >= to_decimal(tier.min_spending):
                return tier
        return ordered[0]

    @staticmethod
    def progress(points, spending, next_tier):
        """
        Percent progress toward `next_tier`, capped at 100.

        The slower of the two requirements sets the pace.
        """
        if next_tier is None:
            return None

        def ratio(current, required):
            required = to_decimal(required)
            if required <= 0:
                return Decimal('1')
            return to_decimal(current) / required

        pace = min(ratio(points, next_tier.min_points), ratio(spending, next_tier.min_spending))
        percent = min(pace * 100, Decimal('100'))
        return percent.quantize(Decimal('0.01'))
