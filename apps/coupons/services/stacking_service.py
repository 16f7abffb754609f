"""
Combining several coupons on one order.

A single coupon always applies on its own. Several coupons are only summed
when every campaign involved allows multiple coupons; the sum is then capped
at the strictest max_discount_percentage among those campaigns. Otherwise
the single largest discount wins and the rest are rejected.
"""
import logging
from decimal import Decimal

from django.db import IntegrityError, transaction
from django.db.models import F

from apps.campaigns.services import CampaignService, EligibilityEvaluator
from apps.common.exceptions import CouponError
from apps.common.utils import round_money, to_decimal
from ..models import Coupon, CouponRedemption
from .coupon_service import CouponService
from .discounts import DiscountLine, DiscountQuote

logger = logging.getLogger(__name__)

NOT_COMBINABLE = 'This coupon cannot be combined with other offers'


class DiscountStackingService:
    """Quote and redeem coupon combinations"""

    @staticmethod
    def _unique_codes(codes):
        seen = []
        for code in codes:
            normalized = str(code).strip().upper()
            if normalized and normalized not in seen:
                seen.append(normalized)
        return seen

    @staticmethod
    def _allocate(lines, total):
        """Spread the capped total over the lines in order"""
        remaining = total
        for line in lines:
            line.applied = min(line.discount, remaining)
            remaining -= line.applied

    @staticmethod
    def quote(subtotal, codes, user=None, campaign=None, now=None):
        subtotal = round_money(subtotal)
        quote = DiscountQuote(subtotal=subtotal)
        context = None
        lines = []

        for code in DiscountStackingService._unique_codes(codes):
            try:
                coupon = CouponService.validate(code, subtotal, user=user, now=now)
            except CouponError as e:
                quote.rejected[code] = e.message
                continue

            if coupon.is_mini_coupon:
                if user is None or not user.is_authenticated:
                    quote.rejected[code] = 'Sign in to use this coupon'
                    continue
                if context is None:
                    context = EligibilityEvaluator.build_context(user, cart_value=subtotal, now=now)
                result = EligibilityEvaluator.check_campaign(coupon.campaign, context)
                if not result:
                    quote.rejected[code] = result.reason
                    continue

            lines.append(DiscountLine(coupon=coupon, discount=coupon.calculate_discount(subtotal)))

        if not lines:
            return quote

        if len(lines) == 1:
            quote.lines = lines
            quote.total_discount = min(lines[0].discount, subtotal)
            DiscountStackingService._allocate(lines, quote.total_discount)
            return quote

        campaigns = {line.campaign.pk: line.campaign for line in lines if line.campaign is not None}
        if campaign is not None:
            if user is None or not user.is_authenticated:
                logger.info(f"Ignoring campaign {campaign.pk} for anonymous quote")
            else:
                if context is None:
                    context = EligibilityEvaluator.build_context(user, cart_value=subtotal, now=now)
                result = EligibilityEvaluator.check_campaign(campaign, context)
                if result:
                    campaigns[campaign.pk] = campaign
                else:
                    logger.info(f"Ignoring campaign {campaign.pk} for user {user.id}: {result.reason}")
        stackable = bool(campaigns) and all(c.allow_multiple_coupons for c in campaigns.values())

        if stackable:
            cap = min(
                round_money(subtotal * to_decimal(c.max_discount_percentage) / 100)
                for c in campaigns.values()
            )
            total = sum((line.discount for line in lines), Decimal('0'))
            quote.lines = lines
            quote.stacked = True
            quote.cap = cap
            quote.total_discount = min(total, cap, subtotal)
        else:
            best = max(lines, key=lambda line: line.discount)
            quote.lines = [best]
            quote.total_discount = min(best.discount, subtotal)
            for line in lines:
                if line is not best:
                    quote.rejected[line.code] = NOT_COMBINABLE
            logger.info(f"Coupons not combinable, applied {best.code} only")

        DiscountStackingService._allocate(quote.lines, quote.total_discount)
        return quote

    @staticmethod
    def redeem(quote, user, order_id):
        """Consume the coupons of a quote against an order"""
        if not quote.lines:
            reason = next(iter(quote.rejected.values()), 'No coupons to redeem')
            raise CouponError(reason, code='nothing_to_redeem')

        order_id = str(order_id)
        redemptions = []
        with transaction.atomic():
            for line in quote.lines:
                coupon = Coupon.objects.select_for_update().get(pk=line.coupon.pk)
                if coupon.is_exhausted:
                    raise CouponError('This coupon has reached its usage limit', code='usage_limit')
                if coupon.per_user_limit and CouponService.user_redemptions(coupon, user) >= coupon.per_user_limit:
                    raise CouponError('You have already used this coupon', code='per_user_limit')

                try:
                    with transaction.atomic():
                        redemption = CouponRedemption.objects.create(
                            coupon=coupon,
                            user=user,
                            order_id=order_id,
                            discount_amount=line.applied,
                        )
                except IntegrityError:
                    raise CouponError('This coupon has already been applied to this order', code='duplicate_order')

                Coupon.objects.filter(pk=coupon.pk).update(usage_count=F('usage_count') + 1)
                if coupon.is_spin_generated:
                    from apps.spinwheel.models import SpinWheel
                    coupon.spin_results.update(redeemed=True)
                    SpinWheel.objects.filter(results__coupon=coupon).update(conversions=F('conversions') + 1)
                if coupon.campaign_id:
                    CampaignService.track(coupon.campaign_id, 'redeemed', component='mini_coupons')
                redemptions.append(redemption)

        logger.info(
            f"User {user.id} redeemed {', '.join(quote.codes)} on order {order_id} "
            f"for {quote.total_discount}"
        )
        return redemptions
