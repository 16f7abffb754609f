"""
Weighted reward selection for spin wheels.
"""
import random
from decimal import Decimal

from ..models import MAX_TOTAL_PROBABILITY


class SpinWheelResolver:
    """Pick a segment from a cumulative-probability table"""

    @staticmethod
    def pick(segments, rng=None):
        """
        Draw r uniformly in [0, 100) and return the first segment whose
        cumulative probability exceeds it.

        Probabilities are used as given. When they add up to less than 100 a
        draw past the last segment is a no win and returns None.
        """
        rng = rng or random
        draw = Decimal(repr(rng.random())) * MAX_TOTAL_PROBABILITY
        cumulative = Decimal('0')
        for segment in segments:
            cumulative += Decimal(str(segment.probability))
            if draw < cumulative:
                return segment
        return None

    @staticmethod
    def validate_probabilities(probabilities):
        total = sum((Decimal(str(p)) for p in probabilities), Decimal('0'))
        if any(Decimal(str(p)) < 0 for p in probabilities):
            raise ValueError("Segment probabilities cannot be negative")
        if total > MAX_TOTAL_PROBABILITY:
            raise ValueError(f"Segment probabilities add up to {total}, more than 100")
        return total
