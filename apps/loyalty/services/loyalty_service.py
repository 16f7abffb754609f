"""
Loyalty service for accrual, redemption and tier management.
"""
import logging
from datetime import timedelta
from decimal import Decimal

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import Count, Sum
from django.utils import timezone

from apps.common.exceptions import InsufficientPointsError
from apps.common.utils import round_money, to_decimal
from ..models import Badge, LoyaltyMember, LoyaltyTier, PointsTransaction, PurchaseRecord
from .accrual import TierPointsCalculator
from .notification_service import TierNotificationService

logger = logging.getLogger(__name__)


def promotions_setting(name):
    return settings.PROMOTIONS[name]


class LoyaltyService:
    """Service class for loyalty operations"""

    @staticmethod
    def get_or_create_member(user):
        """Get the user's membership, creating it at the entry tier if missing"""
        try:
            return user.loyalty_member
        except LoyaltyMember.DoesNotExist:
            return LoyaltyMember.create_for_user(user)

    @staticmethod
    def calculate_order_points(subtotal, tier, boost=1):
        return TierPointsCalculator.order_points(
            subtotal,
            tier.points_multiplier,
            promotions_setting('LOYALTY_POINTS_DIVISOR'),
            boost,
        )

    @staticmethod
    def resolve_tier(lifetime_points, total_spent):
        return LoyaltyTier.resolve_for(lifetime_points, to_decimal(total_spent))

    @staticmethod
    def lock_member(user):
        """Fetch the member row locked for update, creating it first if needed"""
        LoyaltyService.get_or_create_member(user)
        return LoyaltyMember.objects.select_for_update().select_related('tier').get(user=user)

    @staticmethod
    def _finish_upgrade(member, upgrade):
        if upgrade is None:
            return False
        upgrade.save()
        logger.info(
            f"Tier upgrade for user {member.user_id}: "
            f"{upgrade.from_tier.name if upgrade.from_tier else None} -> {upgrade.to_tier.name}"
        )
        if member.award_badge(Badge.for_tier(upgrade.to_tier)):
            logger.info(f"User {member.user_id} earned the {upgrade.to_tier.name} tier badge")
        TierNotificationService.send_upgrade_notification(member, upgrade.from_tier, upgrade.to_tier)
        return True

    @staticmethod
    def _purchase_result(member, record, duplicate=False, tier_updated=False):
        return {
            'order_id': record.order_id,
            'points_earned': record.points_earned,
            'tier_multiplier': record.tier_multiplier,
            'boost_multiplier': record.boost_multiplier,
            'total_points': member.points,
            'lifetime_points': member.lifetime_points,
            'total_spent': member.total_spent,
            'tier': member.tier.name,
            'tier_updated': tier_updated,
            'available_spins': member.available_spins,
            'duplicate': duplicate,
        }

    @staticmethod
    def process_order(user, order_id, subtotal, now=None):
        """
        Credit a completed order: spending, points, spin tokens and tier.

        Calling it again for the same order returns the first result unchanged.
        """
        from apps.campaigns.services import CampaignService

        order_id = str(order_id)
        subtotal = round_money(subtotal)
        if subtotal < 0:
            raise ValueError("Order subtotal cannot be negative")

        with transaction.atomic():
            member = LoyaltyService.lock_member(user)

            existing = member.purchases.filter(order_id=order_id).first()
            if existing:
                logger.info(f"Order {order_id} already credited to user {user.id}")
                return LoyaltyService._purchase_result(member, existing, duplicate=True)

            boost_campaign = CampaignService.boosting_campaign(user, now=now)
            boost = boost_campaign.points_multiplier if boost_campaign else Decimal('1')
            points = LoyaltyService.calculate_order_points(subtotal, member.tier, boost)

            try:
                with transaction.atomic():
                    record = PurchaseRecord.objects.create(
                        member=member,
                        order_id=order_id,
                        subtotal=subtotal,
                        points_earned=points,
                        tier_multiplier=member.tier.points_multiplier,
                        boost_multiplier=boost,
                    )
            except IntegrityError:
                record = member.purchases.get(order_id=order_id)
                return LoyaltyService._purchase_result(member, record, duplicate=True)

            member.total_spent = to_decimal(member.total_spent) + subtotal
            member.orders_count += 1

            if points > 0:
                description = f'Order {order_id} ({member.tier.points_multiplier}x)'
                if boost_campaign:
                    description += f' boosted by {boost_campaign.name}'
                member.add_points(
                    points,
                    'earned',
                    description=description,
                    reference_id=f'order_{order_id}',
                    campaign=boost_campaign,
                ).save()
                tokens = member.award_spin_tokens(promotions_setting('SPIN_POINTS_THRESHOLD'))
                if tokens:
                    logger.info(f"Awarded {tokens} spin token(s) to user {user.id}")

            upgrade = member.refresh_tier(reason=f'Order {order_id}')
            member.save()
            tier_updated = LoyaltyService._finish_upgrade(member, upgrade)

        logger.info(f"Order {order_id} credited {points} points to user {user.id}")
        return LoyaltyService._purchase_result(member, record, tier_updated=tier_updated)

    @staticmethod
    def award_bonus_points(user, points, reason, campaign=None, transaction_type='bonus', reference_id=None):
        """Grant points outside of order accrual (admin awards, spin rewards)"""
        points = int(points)
        with transaction.atomic():
            member = LoyaltyService.lock_member(user)
            points_transaction = member.add_points(
                points,
                transaction_type,
                description=reason,
                reference_id=reference_id,
                campaign=campaign,
            )
            points_transaction.save()
            member.award_spin_tokens(promotions_setting('SPIN_POINTS_THRESHOLD'))
            upgrade = member.refresh_tier(reason=reason)
            member.save()
            LoyaltyService._finish_upgrade(member, upgrade)

        logger.info(f"Awarded {points} {transaction_type} points to user {user.id}: {reason}")
        return points_transaction

    @staticmethod
    def redeem_points(user, points, order_id=None):
        """Convert points into a currency discount"""
        points = int(points)
        minimum = promotions_setting('MIN_POINTS_REDEMPTION')
        if points < minimum:
            raise InsufficientPointsError(f'Minimum redemption is {minimum} points', code='below_minimum')

        with transaction.atomic():
            member = LoyaltyService.lock_member(user)
            if points > member.points:
                raise InsufficientPointsError(code='insufficient_balance')

            discount_amount = round_money(Decimal(points) * promotions_setting('POINTS_REDEMPTION_VALUE'))
            points_transaction = member.redeem_points(
                points,
                description=f'Redeemed for {discount_amount} discount',
                reference_id=f'order_{order_id}' if order_id else None,
            )
            points_transaction.save()
            member.save()

        logger.info(f"User {user.id} redeemed {points} points for {discount_amount}")
        return {
            'points_redeemed': points,
            'discount_amount': discount_amount,
            'remaining_points': member.points,
            'transaction_id': points_transaction.id,
        }

    @staticmethod
    def tier_progress(member):
        """Describe the next tier and how far the member is from it"""
        next_tier = member.tier.next_tier()
        if next_tier is None:
            return {
                'current_tier': member.tier.name,
                'next_tier': None,
                'progress': None,
                'points_needed': 0,
                'spending_needed': Decimal('0'),
            }

        return {
            'current_tier': member.tier.name,
            'next_tier': next_tier.name,
            'requirements': {
                'min_points': next_tier.min_points,
                'min_spending': next_tier.min_spending,
            },
            'progress': TierPointsCalculator.progress(member.lifetime_points, member.total_spent, next_tier),
            'points_needed': max(next_tier.min_points - member.lifetime_points, 0),
            'spending_needed': max(to_decimal(next_tier.min_spending) - to_decimal(member.total_spent), Decimal('0')),
        }

    @staticmethod
    def points_history(member, transaction_type=None):
        transactions = member.transactions.select_related('campaign')
        if transaction_type:
            transactions = transactions.filter(transaction_type=transaction_type)
        return transactions

    @staticmethod
    def get_analytics(days=30):
        """Program-wide loyalty figures for the admin dashboard"""
        since = timezone.now() - timedelta(days=days)
        tier_distribution = list(
            LoyaltyMember.objects.values('tier__name').annotate(count=Count('id')).order_by('tier__level')
        )
        recent = PointsTransaction.objects.filter(created_at__gte=since)
        issued = recent.filter(amount__gt=0).aggregate(total=Sum('amount'))['total'] or 0
        redeemed = recent.filter(amount__lt=0).aggregate(total=Sum('amount'))['total'] or 0

        return {
            'total_members': LoyaltyMember.objects.count(),
            'tier_distribution': [
                {'tier': row['tier__name'], 'count': row['count']} for row in tier_distribution
            ],
            'period_days': days,
            'points_issued': issued,
            'points_redeemed': abs(redeemed),
            'outstanding_points': LoyaltyMember.objects.aggregate(total=Sum('points'))['total'] or 0,
        }

    @staticmethod
    def leaderboard(limit=10):
        """Members with the most lifetime points, with their badges"""
        return (
            LoyaltyMember.objects.select_related('user', 'tier')
            .prefetch_related('badges__badge')
            .order_by('-lifetime_points', '-total_spent', 'joined_at')[:limit]
        )
