"""
Tier notification service for handling upgrade notifications.
"""
import logging

logger = logging.getLogger(__name__)


class TierNotificationService:
    """Service for handling tier upgrade notifications"""

    @staticmethod
    def send_upgrade_notification(member, old_tier, new_tier):
        """Send tier upgrade notification"""
        notification_data = {
            'user_id': member.user_id,
            'old_tier': old_tier.display_name if old_tier else None,
            'new_tier': new_tier.display_name,
            'benefits': member.get_tier_benefits(),
            'message': f'Congratulations! You have been upgraded to {new_tier.display_name} tier!'
        }

        if member.email_notifications:
            # Delivery channels are not wired up yet, so the notice is only logged
            logger.info(f"Tier upgrade notification: {notification_data}")

        return notification_data
