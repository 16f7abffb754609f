"""
Tests for coupon validation, discount stacking and redemption.
"""
from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from apps.campaigns.services import CampaignService
from apps.common.exceptions import CouponError
from apps.coupons.models import Coupon, CouponRedemption
from apps.coupons.services import CouponService, DiscountStackingService
from apps.coupons.services.stacking_service import NOT_COMBINABLE
from apps.spinwheel.services import SpinService
from tests.factories import (
    CampaignFactory, CouponFactory, SpinSegmentFactory, SpinWheelFactory, UserFactory
)


class FixedRandom:
    def random(self):
        return 0.5


class TestCalculateDiscount:

    @pytest.mark.parametrize('coupon_type,value,maximum,minimum,subtotal,expected', [
        ('percentage', '10', None, '0', '500', '50.00'),
        ('percentage', '10', '30', '0', '500', '30.00'),
        ('percentage', '10', None, '0', '333.33', '33.33'),
        ('percentage', '12.5', None, '0', '99.99', '12.50'),
        ('fixed', '200', None, '0', '150', '150.00'),
        ('fixed', '50', None, '100', '80', '0.00'),
        ('free_shipping', '0', None, '0', '500', '0.00'),
        ('percentage', '10', None, '0', '0', '0.00'),
    ])
    def test_discount(self, coupon_type, value, maximum, minimum, subtotal, expected):
        coupon = Coupon(
            code='TEST',
            coupon_type=coupon_type,
            value=Decimal(value),
            maximum_discount=Decimal(maximum) if maximum else None,
            minimum_order_amount=Decimal(minimum),
        )
        assert coupon.calculate_discount(Decimal(subtotal)) == Decimal(expected)


@pytest.mark.django_db
class TestCouponValidation:

    def assert_rejected(self, code, subtotal, message, user=None):
        with pytest.raises(CouponError) as excinfo:
            CouponService.validate(code, subtotal, user=user)
        assert message in excinfo.value.message

    def test_valid_coupon_case_insensitive(self, member):
        coupon = CouponFactory(code='SUMMER10')
        assert CouponService.validate(' summer10 ', Decimal('500'), user=member.user) == coupon

    def test_unknown_code(self, member):
        self.assert_rejected('NOPE', Decimal('500'), 'Invalid coupon code', member.user)

    def test_minimum_order_not_met(self, member):
        CouponFactory(code='BIGSPEND', minimum_order_amount=Decimal('1000'))
        self.assert_rejected('BIGSPEND', Decimal('500'), 'Minimum order amount of 1000', member.user)

    def test_inactive(self, member):
        CouponFactory(code='OFF', is_active=False)
        self.assert_rejected('OFF', Decimal('500'), 'This coupon is no longer active', member.user)

    def test_expired(self, member):
        now = timezone.now()
        CouponFactory(code='OLD', valid_from=now - timedelta(days=10), valid_until=now - timedelta(days=1))
        self.assert_rejected('OLD', Decimal('500'), 'This coupon has expired', member.user)

    def test_not_yet_active(self, member):
        now = timezone.now()
        CouponFactory(code='SOON', valid_from=now + timedelta(days=1), valid_until=now + timedelta(days=10))
        self.assert_rejected('SOON', Decimal('500'), 'This coupon is not yet active', member.user)

    def test_usage_limit_reached(self, member):
        CouponFactory(code='GONE', usage_limit=5, usage_count=5)
        self.assert_rejected('GONE', Decimal('500'), 'This coupon has reached its usage limit', member.user)

    def test_per_user_limit(self, member):
        coupon = CouponFactory(code='ONCE')
        CouponRedemption.objects.create(
            coupon=coupon, user=member.user, order_id='A-1', discount_amount=Decimal('50')
        )
        self.assert_rejected('ONCE', Decimal('500'), 'You have already used this coupon', member.user)

    def test_personal_coupon_only_for_owner(self, member):
        other = UserFactory()
        CouponFactory(code='MINE', generated_for=other)
        self.assert_rejected('MINE', Decimal('500'), 'Invalid coupon code', member.user)
        assert CouponService.validate('MINE', Decimal('500'), user=other).code == 'MINE'

    def test_validation_result_reports_discount(self, member):
        CouponFactory(code='TENOFF')
        result = CouponService.validation_result('TENOFF', Decimal('250'), user=member.user)
        assert result['valid'] is True
        assert result['discount_amount'] == Decimal('25.00')

        result = CouponService.validation_result('MISSING', Decimal('250'), user=member.user)
        assert result == {
            'valid': False, 'coupon': None, 'discount_amount': 0, 'message': 'Invalid coupon code'
        }


@pytest.mark.django_db
class TestDiscountStacking:

    def test_single_coupon(self, member):
        CouponFactory(code='TENOFF')
        quote = DiscountStackingService.quote(Decimal('1000'), ['TENOFF'], user=member.user)

        assert quote.codes == ['TENOFF']
        assert quote.total_discount == Decimal('100.00')
        assert quote.final_total == Decimal('900.00')
        assert not quote.stacked

    def test_duplicate_codes_count_once(self, member):
        CouponFactory(code='TENOFF')
        quote = DiscountStackingService.quote(Decimal('1000'), ['TENOFF', 'tenoff'], user=member.user)
        assert quote.codes == ['TENOFF']
        assert quote.total_discount == Decimal('100.00')

    def test_stacked_mini_coupons_are_capped(self, member):
        campaign = CampaignFactory(allow_multiple_coupons=True, max_discount_percentage=Decimal('15'))
        CouponFactory(code='MINIA', campaign=campaign)
        CouponFactory(code='MINIB', campaign=campaign)

        quote = DiscountStackingService.quote(Decimal('1000'), ['MINIA', 'MINIB'], user=member.user)

        assert quote.stacked
        assert quote.cap == Decimal('150.00')
        assert quote.total_discount == Decimal('150.00')
        assert [line.applied for line in quote.lines] == [Decimal('100.00'), Decimal('50.00')]

    def test_stacked_total_below_cap(self, member):
        campaign = CampaignFactory(allow_multiple_coupons=True, max_discount_percentage=Decimal('50'))
        CouponFactory(code='MINIA', campaign=campaign)
        CouponFactory(code='MINIB', campaign=campaign, coupon_type='fixed', value=Decimal('40'))

        quote = DiscountStackingService.quote(Decimal('1000'), ['MINIA', 'MINIB'], user=member.user)

        assert quote.total_discount == Decimal('140.00')
        assert quote.final_total == Decimal('860.00')

    def test_strictest_campaign_cap_wins(self, member):
        loose = CampaignFactory(allow_multiple_coupons=True, max_discount_percentage=Decimal('50'))
        strict = CampaignFactory(allow_multiple_coupons=True, max_discount_percentage=Decimal('12'))
        CouponFactory(code='LOOSE', campaign=loose)
        CouponFactory(code='STRICT', campaign=strict)

        quote = DiscountStackingService.quote(Decimal('1000'), ['LOOSE', 'STRICT'], user=member.user)

        assert quote.cap == Decimal('120.00')
        assert quote.total_discount == Decimal('120.00')

    def test_running_campaign_lets_general_coupons_stack(self, member):
        campaign = CampaignFactory(allow_multiple_coupons=True, max_discount_percentage=Decimal('100'))
        CouponFactory(code='TENOFF')
        CouponFactory(code='ALSOTEN')

        quote = DiscountStackingService.quote(
            Decimal('1000'), ['TENOFF', 'ALSOTEN'], user=member.user, campaign=campaign
        )

        assert quote.stacked
        assert quote.total_discount == Decimal('200.00')

    @pytest.mark.parametrize('campaign_fields', [
        {'status': 'draft'},
        {'status': 'paused'},
        {'status': 'completed'},
        {'eligibility_rules': {'loyaltyTiers': ['gold']}},
    ])
    def test_passed_campaign_must_apply_to_shopper(self, member, campaign_fields):
        campaign = CampaignFactory(
            allow_multiple_coupons=True, max_discount_percentage=Decimal('100'), **campaign_fields
        )
        CouponFactory(code='TENOFF')
        CouponFactory(code='ALSOTEN')

        quote = DiscountStackingService.quote(
            Decimal('1000'), ['TENOFF', 'ALSOTEN'], user=member.user, campaign=campaign
        )

        assert not quote.stacked
        assert quote.codes == ['TENOFF']
        assert quote.total_discount == Decimal('100.00')
        assert quote.rejected == {'ALSOTEN': NOT_COMBINABLE}

    def test_passed_campaign_ignored_without_user(self, db):
        campaign = CampaignFactory(allow_multiple_coupons=True, max_discount_percentage=Decimal('100'))
        CouponFactory(code='TENOFF')
        CouponFactory(code='ALSOTEN')

        quote = DiscountStackingService.quote(Decimal('1000'), ['TENOFF', 'ALSOTEN'], campaign=campaign)

        assert not quote.stacked
        assert quote.total_discount == Decimal('100.00')

    def test_non_stackable_best_discount_wins(self, member):
        CouponFactory(code='TENOFF')
        CouponFactory(code='FLAT150', coupon_type='fixed', value=Decimal('150'))

        quote = DiscountStackingService.quote(Decimal('1000'), ['TENOFF', 'FLAT150'], user=member.user)

        assert quote.codes == ['FLAT150']
        assert quote.total_discount == Decimal('150.00')
        assert quote.rejected == {'TENOFF': NOT_COMBINABLE}

    def test_campaign_without_stacking(self, member):
        campaign = CampaignFactory(allow_multiple_coupons=False)
        CouponFactory(code='MINIA', campaign=campaign)
        CouponFactory(code='MINIB', campaign=campaign, value=Decimal('20'))

        quote = DiscountStackingService.quote(Decimal('1000'), ['MINIA', 'MINIB'], user=member.user)

        assert quote.codes == ['MINIB']
        assert 'MINIA' in quote.rejected

    def test_ineligible_mini_coupon_rejected(self, member):
        campaign = CampaignFactory(eligibility_rules={'minCartValue': 5000})
        CouponFactory(code='BIGCART', campaign=campaign)
        CouponFactory(code='TENOFF')

        quote = DiscountStackingService.quote(Decimal('1000'), ['BIGCART', 'TENOFF'], user=member.user)

        assert quote.codes == ['TENOFF']
        assert quote.rejected['BIGCART'] == 'Minimum cart value of 5000 required'

    def test_mini_coupon_of_paused_campaign_rejected(self, member):
        campaign = CampaignFactory(status='paused')
        CouponFactory(code='PAUSED', campaign=campaign)

        quote = DiscountStackingService.quote(Decimal('1000'), ['PAUSED'], user=member.user)

        assert quote.lines == []
        assert quote.total_discount == Decimal('0.00')
        assert 'PAUSED' in quote.rejected

    def test_mini_coupon_needs_signed_in_user(self, db):
        CouponFactory(code='MINIA', campaign=CampaignFactory())
        quote = DiscountStackingService.quote(Decimal('1000'), ['MINIA'])
        assert quote.rejected == {'MINIA': 'Sign in to use this coupon'}

    def test_discount_never_exceeds_subtotal(self, member):
        CouponFactory(code='FLAT500', coupon_type='fixed', value=Decimal('500'))
        quote = DiscountStackingService.quote(Decimal('120'), ['FLAT500'], user=member.user)
        assert quote.total_discount == Decimal('120.00')
        assert quote.final_total == Decimal('0.00')

    def test_free_shipping_flag(self, member):
        CouponFactory(code='SHIPFREE', coupon_type='free_shipping', value=Decimal('0'))
        quote = DiscountStackingService.quote(Decimal('300'), ['SHIPFREE'], user=member.user)
        assert quote.free_shipping
        assert quote.total_discount == Decimal('0.00')


@pytest.mark.django_db
class TestRedemption:

    def test_redeem_consumes_usage(self, member):
        coupon = CouponFactory(code='TENOFF', usage_limit=10)
        quote = DiscountStackingService.quote(Decimal('1000'), ['TENOFF'], user=member.user)

        redemptions = DiscountStackingService.redeem(quote, member.user, 'ORDER-1')

        coupon.refresh_from_db()
        assert coupon.usage_count == 1
        assert redemptions[0].discount_amount == Decimal('100.00')
        assert redemptions[0].order_id == 'ORDER-1'

    def test_second_use_rejected(self, member):
        CouponFactory(code='TENOFF')
        quote = DiscountStackingService.quote(Decimal('1000'), ['TENOFF'], user=member.user)
        DiscountStackingService.redeem(quote, member.user, 'ORDER-1')

        with pytest.raises(CouponError) as excinfo:
            DiscountStackingService.redeem(quote, member.user, 'ORDER-2')
        assert excinfo.value.message == 'You have already used this coupon'

    def test_same_order_twice_rejected(self, member):
        CouponFactory(code='UNLIMITED', per_user_limit=0)
        quote = DiscountStackingService.quote(Decimal('1000'), ['UNLIMITED'], user=member.user)
        DiscountStackingService.redeem(quote, member.user, 'ORDER-1')

        with pytest.raises(CouponError) as excinfo:
            DiscountStackingService.redeem(quote, member.user, 'ORDER-1')
        assert excinfo.value.message == 'This coupon has already been applied to this order'
        assert Coupon.objects.get(code='UNLIMITED').usage_count == 1

    def test_single_use_coupon_exhausted(self, member):
        other = UserFactory()
        CouponFactory(code='ONEOFF', usage_limit=1)
        quote = DiscountStackingService.quote(Decimal('1000'), ['ONEOFF'], user=member.user)
        DiscountStackingService.redeem(quote, member.user, 'ORDER-1')

        quote = DiscountStackingService.quote(Decimal('1000'), ['ONEOFF'], user=other)
        assert quote.rejected == {'ONEOFF': 'This coupon has reached its usage limit'}
        with pytest.raises(CouponError):
            DiscountStackingService.redeem(quote, other, 'ORDER-2')

    def test_mini_coupon_redemption_tracked(self, member):
        campaign = CampaignFactory()
        CouponFactory(code='MINIA', campaign=campaign)
        quote = DiscountStackingService.quote(Decimal('1000'), ['MINIA'], user=member.user)

        DiscountStackingService.redeem(quote, member.user, 'ORDER-1')

        campaign.refresh_from_db()
        assert campaign.performance['mini_coupons']['redeemed'] == 1

    def test_spin_coupon_redemption_converts(self, member):
        wheel = SpinWheelFactory()
        SpinSegmentFactory(wheel=wheel, reward_type='discount', value=Decimal('10'))
        result = SpinService.spin(member.user, rng=FixedRandom())

        quote = DiscountStackingService.quote(Decimal('1500'), [result.coupon.code], user=member.user)
        assert quote.total_discount == Decimal('150.00')
        DiscountStackingService.redeem(quote, member.user, 'ORDER-1')

        result.refresh_from_db()
        wheel.refresh_from_db()
        assert result.redeemed
        assert wheel.conversions == 1

    def test_spin_coupon_survives_campaign_end(self, member):
        campaign = CampaignFactory()
        wheel = SpinWheelFactory(campaign=campaign)
        SpinSegmentFactory(wheel=wheel, reward_type='discount', value=Decimal('10'))
        result = SpinService.spin(member.user, rng=FixedRandom())

        CampaignService.complete(campaign)

        coupon = Coupon.objects.get(pk=result.coupon.pk)
        assert coupon.is_active
        assert coupon.campaign is None
        quote = DiscountStackingService.quote(Decimal('1500'), [coupon.code], user=member.user)
        assert quote.total_discount == Decimal('150.00')
        assert coupon.code in {c.code for c in CouponService.available(member.user)}

    def test_spin_coupon_minimum_order(self, member):
        wheel = SpinWheelFactory()
        SpinSegmentFactory(wheel=wheel, reward_type='discount', value=Decimal('10'))
        result = SpinService.spin(member.user, rng=FixedRandom())

        quote = DiscountStackingService.quote(Decimal('500'), [result.coupon.code], user=member.user)
        assert quote.lines == []
        assert quote.rejected[result.coupon.code].startswith('Minimum order amount of 1000')


@pytest.mark.django_db
class TestAvailableCoupons:

    def test_lists_only_usable_coupons(self, member):
        other = UserFactory()
        now = timezone.now()
        CouponFactory(code='GENERAL')
        CouponFactory(code='MINE', generated_for=member.user)
        CouponFactory(code='THEIRS', generated_for=other)
        CouponFactory(code='EXPIRED', valid_from=now - timedelta(days=5), valid_until=now - timedelta(days=1))
        CouponFactory(code='PAUSED', campaign=CampaignFactory(status='paused'))
        CouponFactory(code='LIVE', campaign=CampaignFactory())
        used = CouponFactory(code='USED')
        CouponRedemption.objects.create(coupon=used, user=member.user, order_id='A-1', discount_amount=Decimal('5'))

        codes = {coupon.code for coupon in CouponService.available(member.user)}

        assert codes == {'GENERAL', 'MINE', 'LIVE'}
