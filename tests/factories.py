"""
Test factories for creating test data using factory_boy.
"""
from datetime import timedelta
from decimal import Decimal

import factory
from django.contrib.auth import get_user_model
from django.utils import timezone
from factory import Faker, SubFactory
from factory.django import DjangoModelFactory

User = get_user_model()


class UserFactory(DjangoModelFactory):
    """Factory for creating test users."""

    class Meta:
        model = User
        django_get_or_create = ('username',)

    username = factory.Sequence(lambda n: f"testuser{n}")
    email = factory.LazyAttribute(lambda obj: f"{obj.username}@example.com")
    first_name = Faker('first_name')
    last_name = Faker('last_name')
    phone = factory.Sequence(lambda n: f"1234567{n:04d}")
    country = 'IN'
    is_active = True
    password = factory.PostGenerationMethodCall('set_password', 'Str0ngPass!word')


class CampaignFactory(DjangoModelFactory):
    """Factory for running campaigns."""

    class Meta:
        model = 'campaigns.Campaign'

    name = factory.Sequence(lambda n: f"Campaign {n}")
    description = Faker('sentence')
    campaign_type = 'promotional'
    status = 'active'
    start_date = factory.LazyFunction(lambda: timezone.now() - timedelta(days=1))
    end_date = factory.LazyFunction(lambda: timezone.now() + timedelta(days=7))
    priority = 5
    target_audience = 'all'
    eligibility_rules = factory.LazyFunction(dict)
    allow_multiple_coupons = False
    max_discount_percentage = Decimal('50')
    points_multiplier = Decimal('1')


class CouponFactory(DjangoModelFactory):
    """Factory for general coupons valid right now."""

    class Meta:
        model = 'coupons.Coupon'

    code = factory.Sequence(lambda n: f"SAVE{n:04d}")
    name = factory.LazyAttribute(lambda obj: f"Coupon {obj.code}")
    coupon_type = 'percentage'
    value = Decimal('10')
    minimum_order_amount = Decimal('0')
    maximum_discount = None
    valid_from = factory.LazyFunction(lambda: timezone.now() - timedelta(days=1))
    valid_until = factory.LazyFunction(lambda: timezone.now() + timedelta(days=30))
    usage_limit = None
    per_user_limit = 1
    is_active = True


class SpinWheelFactory(DjangoModelFactory):
    class Meta:
        model = 'spinwheel.SpinWheel'

    name = factory.Sequence(lambda n: f"Wheel {n}")
    is_active = True


class SpinSegmentFactory(DjangoModelFactory):
    class Meta:
        model = 'spinwheel.SpinSegment'

    wheel = SubFactory(SpinWheelFactory)
    name = factory.Sequence(lambda n: f"Segment {n}")
    reward_type = 'discount'
    value = Decimal('10')
    probability = Decimal('100')
    position = factory.Sequence(lambda n: n)


def set_member_state(member, tier=None, **fields):
    """Put a member into a known state without going through accrual."""
    if tier is not None:
        member.tier = tier
    for name, value in fields.items():
        setattr(member, name, value)
    member.save()
    return member
