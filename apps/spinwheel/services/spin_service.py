"""
Spin wheel service: eligibility, spinning and reward issuance.
"""
import logging
from datetime import timedelta

from django.conf import settings
from django.db import transaction
from django.db.models import F, Q
from django.utils import timezone

from apps.common.exceptions import SpinError
from ..models import SpinWheel, SpinResult
from .resolver import SpinWheelResolver

logger = logging.getLogger(__name__)

COUPON_REWARDS = {'discount', 'free_shipping'}


def daily_free_spins():
    return settings.PROMOTIONS['DAILY_FREE_SPINS']


class SpinService:
    """Service class for spin wheel operations"""

    @staticmethod
    def get_active_wheel(now=None):
        """The newest wheel that is switched on and inside its window"""
        now = now or timezone.now()
        wheels = SpinWheel.objects.filter(is_active=True).filter(
            Q(start_date__isnull=True) | Q(start_date__lte=now),
            Q(end_date__isnull=True) | Q(end_date__gt=now),
        ).select_related('campaign').order_by('-created_at')
        for wheel in wheels:
            if wheel.is_available(now):
                return wheel
        return None

    @staticmethod
    def can_spin(member, wheel, now=None):
        """Return (allowed, reason) for a member spinning `wheel`"""
        now = now or timezone.now()
        if wheel is None:
            return False, 'No active spin wheels available'
        if not wheel.is_available(now):
            return False, 'This spin wheel is not available'

        wheel_results = SpinResult.objects.filter(member=member, wheel=wheel)
        if wheel.max_spins_per_user is not None and wheel_results.count() >= wheel.max_spins_per_user:
            return False, 'You have used all spins on this wheel'

        if wheel.cooldown_hours:
            last = wheel_results.order_by('-created_at').first()
            if last and last.created_at + timedelta(hours=wheel.cooldown_hours) > now:
                return False, 'Please wait before spinning this wheel again'

        if not member.can_spin(timezone.localdate(now), daily_free_spins()):
            return False, 'No spins available today'
        return True, None

    @staticmethod
    def eligibility(user, now=None):
        from apps.loyalty.services import LoyaltyService

        now = now or timezone.now()
        member = LoyaltyService.get_or_create_member(user)
        wheel = SpinService.get_active_wheel(now)
        allowed, reason = SpinService.can_spin(member, wheel, now)
        return {
            'can_spin': allowed,
            'reason': reason,
            'daily_spin_available': member.has_daily_spin(timezone.localdate(now), daily_free_spins()),
            'available_spins': member.available_spins,
            'total_spins': member.total_spins,
            'last_spin_date': member.last_spin_date,
            'spin_multiplier': member.tier.spin_multiplier,
            'tier': member.tier.name,
            'wheel_id': wheel.id if wheel else None,
        }

    @staticmethod
    def _issue_reward(user, member, wheel, segment, result):
        """Turn the winning segment into the member's reward"""
        from apps.coupons.models import Coupon
        from apps.loyalty.services import LoyaltyService

        if segment.reward_type in COUPON_REWARDS:
            result.coupon = Coupon.generate_spin_coupon(
                user,
                segment.reward_type,
                segment.value,
            )
        elif segment.reward_type == 'loyalty_points':
            points = int(segment.value) * member.tier.spin_multiplier
            result.reward_value = points
            if points > 0:
                LoyaltyService.award_bonus_points(
                    user,
                    points,
                    f'Spin wheel reward: {segment.name}',
                    campaign=wheel.campaign,
                    reference_id=f'spin_{wheel.id}',
                )
        # cashback and product rewards are recorded for manual fulfilment

    @staticmethod
    def spin(user, wheel=None, rng=None, now=None):
        """Spin a wheel for the user and issue whatever it lands on"""
        from apps.campaigns.services import CampaignService
        from apps.loyalty.services import LoyaltyService

        now = now or timezone.now()
        with transaction.atomic():
            member = LoyaltyService.lock_member(user)
            wheel = wheel or SpinService.get_active_wheel(now)

            allowed, reason = SpinService.can_spin(member, wheel, now)
            if not allowed:
                raise SpinError(reason)

            segment = SpinWheelResolver.pick(list(wheel.segments.all()), rng)
            member.consume_spin(timezone.localdate(now), daily_free_spins())
            member.save()

            won = segment is not None and not segment.is_no_win
            result = SpinResult(
                member=member,
                wheel=wheel,
                segment=segment,
                reward_type=segment.reward_type if won else 'no_win',
                reward_value=segment.value if won else 0,
            )
            if won:
                SpinService._issue_reward(user, member, wheel, segment, result)
            result.save()

            SpinWheel.objects.filter(pk=wheel.pk).update(
                total_spins=F('total_spins') + 1,
                rewards_given=F('rewards_given') + (1 if won else 0),
            )
            if wheel.campaign_id:
                CampaignService.track(wheel.campaign_id, 'spins', component='spin_wheel')
                if won:
                    CampaignService.track(wheel.campaign_id, 'rewards', component='spin_wheel')

        logger.info(f"User {user.id} spun wheel {wheel.id}: {result.reward_label}")
        return result

    @staticmethod
    def history(user):
        return SpinResult.objects.filter(member__user=user).select_related('segment', 'wheel', 'coupon')

    @staticmethod
    def analytics(wheel):
        results = wheel.results.all()
        distribution = []
        total = results.count()
        for segment in wheel.segments.all():
            hits = results.filter(segment=segment).count()
            distribution.append({
                'segment': segment.name,
                'probability': segment.probability,
                'hits': hits,
                'observed_rate': round(hits / total * 100, 2) if total else 0,
            })

        return {
            'wheel_id': wheel.id,
            'total_spins': wheel.total_spins,
            'rewards_given': wheel.rewards_given,
            'conversions': wheel.conversions,
            'no_wins': results.filter(reward_type='no_win').count(),
            'total_probability': wheel.total_probability(),
            'segments': distribution,
        }
