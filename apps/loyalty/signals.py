"""
Signals for loyalty app
"""
import logging

from django.conf import settings
from django.db.models.signals import post_save
from django.dispatch import receiver

from .services import LoyaltyService

logger = logging.getLogger(__name__)


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def create_loyalty_member(sender, instance, created, **kwargs):
    """Enroll new users in the loyalty program"""
    if not created:
        return
    try:
        LoyaltyService.get_or_create_member(instance)
    except ValueError as e:
        # Tiers not seeded yet; the membership is created on first use instead
        logger.warning(f"Could not create loyalty membership for user {instance.id}: {e}")
