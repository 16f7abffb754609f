"""
Campaign lifecycle, discovery and performance tracking.
"""
import logging
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from apps.common.exceptions import PromotionError
from apps.common.utils import round_money, to_decimal
from ..models import Campaign, default_performance
from .eligibility import EligibilityEvaluator

logger = logging.getLogger(__name__)

TOP_LEVEL_METRICS = {'views', 'clicks', 'conversions', 'revenue'}
COMPONENT_METRICS = {
    'banners': {'impressions', 'clicks'},
    'mini_coupons': {'issued', 'redeemed'},
    'spin_wheel': {'spins', 'rewards'},
}


class CampaignService:
    """Service class for campaign operations"""

    @staticmethod
    def active_campaigns(now=None):
        """Campaigns live right now, highest priority first"""
        now = now or timezone.now()
        return Campaign.objects.filter(
            status__in=Campaign.LIVE_STATUSES,
            start_date__lte=now,
            end_date__gt=now,
        ).order_by('-priority', 'start_date')

    @staticmethod
    def eligible_campaigns(user, cart_value=0, device=None, now=None):
        context = EligibilityEvaluator.build_context(user, cart_value=cart_value, device=device, now=now)
        return [
            campaign for campaign in CampaignService.active_campaigns(context.now)
            if EligibilityEvaluator.check_campaign(campaign, context)
        ]

    @staticmethod
    def check_eligibility(campaign, user, cart_value=0, device=None, now=None):
        context = EligibilityEvaluator.build_context(user, cart_value=cart_value, device=device, now=now)
        return EligibilityEvaluator.check_campaign(campaign, context)

    @staticmethod
    def boosting_campaign(user, now=None):
        """The running loyalty_boost campaign with the largest multiplier the user qualifies for"""
        now = now or timezone.now()
        boosts = CampaignService.active_campaigns(now).filter(
            campaign_type='loyalty_boost', points_multiplier__gt=1
        )
        if not boosts.exists():
            return None

        context = EligibilityEvaluator.build_context(user, now=now)
        best = None
        for campaign in boosts:
            if not EligibilityEvaluator.check_campaign(campaign, context):
                continue
            if best is None or campaign.points_multiplier > best.points_multiplier:
                best = campaign
        return best

    @staticmethod
    def loyalty_boost_for(user, now=None):
        campaign = CampaignService.boosting_campaign(user, now=now)
        return campaign.points_multiplier if campaign else Decimal('1')

    @staticmethod
    def activate(campaign, actor=None, now=None):
        """Put a campaign live and switch on its mini-coupons and spin wheels"""
        now = now or timezone.now()
        if campaign.end_date <= now:
            raise PromotionError('Cannot activate a campaign that has already ended', code='campaign_ended')

        with transaction.atomic():
            campaign.status = 'scheduled' if campaign.start_date > now else 'active'
            campaign.save(update_fields=['status', 'updated_at'])
            coupons = campaign.coupons.update(is_active=True)
            wheels = campaign.spin_wheels.update(is_active=True)
            campaign.record_history('activated', actor, {
                'status': campaign.status,
                'coupons_activated': coupons,
                'spin_wheels_activated': wheels,
            })

        logger.info(f"Campaign {campaign.id} {campaign.status} ({coupons} coupons, {wheels} wheels)")
        return campaign

    @staticmethod
    def _deactivate(campaign, status, action, actor):
        with transaction.atomic():
            campaign.status = status
            campaign.save(update_fields=['status', 'updated_at'])
            coupons = campaign.coupons.update(is_active=False)
            wheels = campaign.spin_wheels.update(is_active=False)
            campaign.record_history(action, actor, {
                'coupons_deactivated': coupons,
                'spin_wheels_deactivated': wheels,
            })
        logger.info(f"Campaign {campaign.id} {status}")
        return campaign

    @staticmethod
    def pause(campaign, actor=None):
        if campaign.status not in Campaign.LIVE_STATUSES:
            raise PromotionError('Only scheduled or active campaigns can be paused', code='not_live')
        return CampaignService._deactivate(campaign, 'paused', 'paused', actor)

    @staticmethod
    def complete(campaign, actor=None):
        if campaign.status == 'completed':
            raise PromotionError('Campaign is already completed', code='already_completed')
        return CampaignService._deactivate(campaign, 'completed', 'completed', actor)

    @staticmethod
    def track(campaign_id, metric, value=1, component=None):
        """
        Add `value` to a performance counter.

        `component` selects a sub-metric group (banners, mini_coupons, spin_wheel).
        """
        if component:
            if metric not in COMPONENT_METRICS.get(component, ()):
                raise ValueError(f"Unknown metric {component}.{metric}")
        elif metric not in TOP_LEVEL_METRICS:
            raise ValueError(f"Unknown metric {metric}")

        with transaction.atomic():
            campaign = Campaign.objects.select_for_update().get(pk=campaign_id)
            performance = default_performance()
            performance.update(campaign.performance or {})

            if component:
                group = dict(default_performance()[component])
                group.update(performance.get(component) or {})
                group[metric] = group.get(metric, 0) + int(value)
                performance[component] = group
            elif metric == 'revenue':
                performance['revenue'] = str(round_money(to_decimal(performance.get('revenue', 0)) + to_decimal(value)))
            else:
                performance[metric] = performance.get(metric, 0) + int(value)

            campaign.performance = performance
            campaign.save(update_fields=['performance', 'updated_at'])
        return campaign

    @staticmethod
    def analytics(campaign):
        performance = default_performance()
        performance.update(campaign.performance or {})
        views = performance.get('views', 0)
        conversions = performance.get('conversions', 0)
        conversion_rate = round(conversions / views * 100, 2) if views else 0

        return {
            'campaign_id': campaign.id,
            'status': campaign.status,
            'performance': performance,
            'conversion_rate': conversion_rate,
            'coupons': {
                'total': campaign.coupons.count(),
                'redemptions': sum(coupon.usage_count for coupon in campaign.coupons.all()),
            },
            'spin_wheels': campaign.spin_wheels.count(),
            'history': [
                {'action': entry.action, 'created_at': entry.created_at, 'details': entry.details}
                for entry in campaign.history.all()[:20]
            ],
        }
