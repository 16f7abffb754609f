"""
Loyalty services module.

All services are exported from this module to maintain backward compatibility.
"""
from .accrual import TierPointsCalculator
from .loyalty_service import LoyaltyService
from .notification_service import TierNotificationService

__all__ = [
    'TierPointsCalculator',
    'LoyaltyService',
    'TierNotificationService',
]
