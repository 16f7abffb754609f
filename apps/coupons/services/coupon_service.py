"""
Coupon lookup and validation.
"""
import logging

from django.db.models import Count, F, Q
from django.utils import timezone

from apps.campaigns.models import Campaign
from apps.common.exceptions import CouponError
from apps.common.utils import to_decimal
from ..models import Coupon

logger = logging.getLogger(__name__)


class CouponService:
    """Service class for coupon operations"""

    @staticmethod
    def get_by_code(code):
        if not code:
            return None
        return Coupon.objects.select_related('campaign').filter(code=code.strip().upper()).first()

    @staticmethod
    def user_redemptions(coupon, user):
        if user is None or not user.is_authenticated:
            return 0
        return coupon.redemptions.filter(user=user).count()

    @staticmethod
    def validate(code, subtotal, user=None, now=None):
        """
        Return the coupon if it can be applied to `subtotal`.

        Raises CouponError carrying the message shown to the shopper.
        """
        now = now or timezone.now()
        subtotal = to_decimal(subtotal)
        coupon = CouponService.get_by_code(code)

        if coupon is None:
            raise CouponError('Invalid coupon code', code='not_found')
        if not coupon.is_active:
            raise CouponError('This coupon is no longer active', code='inactive')
        if now > coupon.valid_until:
            raise CouponError('This coupon has expired', code='expired')
        if now < coupon.valid_from:
            raise CouponError('This coupon is not yet active', code='not_started')
        if coupon.is_exhausted:
            raise CouponError('This coupon has reached its usage limit', code='usage_limit')
        if coupon.generated_for_id and (user is None or coupon.generated_for_id != user.id):
            raise CouponError('Invalid coupon code', code='not_owner')
        if coupon.per_user_limit and CouponService.user_redemptions(coupon, user) >= coupon.per_user_limit:
            raise CouponError('You have already used this coupon', code='per_user_limit')
        if subtotal < coupon.minimum_order_amount:
            raise CouponError(
                f'Minimum order amount of {coupon.minimum_order_amount} required',
                code='minimum_order',
            )
        return coupon

    @staticmethod
    def validation_result(code, subtotal, user=None, now=None):
        """Validation outcome as reported to the checkout page"""
        try:
            coupon = CouponService.validate(code, subtotal, user=user, now=now)
        except CouponError as e:
            logger.debug(f"Coupon {code!r} rejected: {e.message}")
            return {'valid': False, 'coupon': None, 'discount_amount': 0, 'message': e.message}

        return {
            'valid': True,
            'coupon': coupon,
            'discount_amount': coupon.calculate_discount(subtotal),
            'message': 'Coupon applied successfully',
        }

    @staticmethod
    def available(user, now=None):
        """Coupons the user could apply right now"""
        now = now or timezone.now()
        coupons = Coupon.objects.select_related('campaign').filter(
            is_active=True,
            valid_from__lte=now,
            valid_until__gte=now,
        ).filter(
            Q(usage_limit__isnull=True) | Q(usage_count__lt=F('usage_limit')),
            Q(generated_for__isnull=True) | Q(generated_for=user),
            Q(campaign__isnull=True) | Q(
                campaign__status__in=Campaign.LIVE_STATUSES,
                campaign__start_date__lte=now,
                campaign__end_date__gt=now,
            ),
        ).annotate(
            used_by_user=Count('redemptions', filter=Q(redemptions__user=user))
        ).order_by('valid_until')

        return [coupon for coupon in coupons if coupon.used_by_user < coupon.per_user_limit]
