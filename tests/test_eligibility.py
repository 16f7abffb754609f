"""
Tests for campaign eligibility evaluation.
"""
from datetime import timedelta
from decimal import Decimal

import pytest
from django.contrib.auth.models import Group
from django.utils import timezone
from hypothesis import given, settings, strategies as st

from apps.campaigns.services import EligibilityContext, EligibilityEvaluator
from tests.factories import CampaignFactory, UserFactory, set_member_state


def make_context(**overrides):
    values = {
        'user_types': {'returning'},
        'loyalty_tier': 'silver',
        'cart_value': Decimal('1500'),
        'orders_count': 3,
        'total_spent': Decimal('4000'),
        'account_age_days': 120,
        'country': 'IN',
        'device': 'mobile',
        'segments': {'newsletter'},
    }
    values.update(overrides)
    return EligibilityContext(**values)


class TestPredicates:

    def test_empty_rules_are_eligible(self):
        result = EligibilityEvaluator.evaluate({}, make_context())
        assert result.eligible
        assert result.failed_rule is None

    @pytest.mark.parametrize('rules, failed_rule', [
        ({'userType': ['new']}, 'userType'),
        ({'loyaltyTiers': ['gold', 'platinum']}, 'loyaltyTiers'),
        ({'minCartValue': 2000}, 'minCartValue'),
        ({'maxCartValue': 1000}, 'maxCartValue'),
        ({'purchaseHistory': {'firstTime': True}}, 'purchaseHistory'),
        ({'purchaseHistory': {'minOrders': 5}}, 'purchaseHistory'),
        ({'purchaseHistory': {'maxOrders': 2}}, 'purchaseHistory'),
        ({'purchaseHistory': {'minTotalSpent': 5000}}, 'purchaseHistory'),
        ({'minAccountAgeDays': 365}, 'accountAge'),
        ({'maxAccountAgeDays': 30}, 'accountAge'),
        ({'geographicLocation': ['US', 'CA']}, 'geographicLocation'),
        ({'deviceType': ['desktop']}, 'deviceType'),
        ({'userSegments': ['vip_list']}, 'userSegments'),
    ])
    def test_failing_rule_is_reported(self, rules, failed_rule):
        result = EligibilityEvaluator.evaluate(rules, make_context())
        assert not result
        assert result.failed_rule == failed_rule
        assert result.reason

    @pytest.mark.parametrize('rules', [
        {'userType': ['returning', 'vip']},
        {'userType': 'all'},
        {'loyaltyTiers': ['Silver']},
        {'minCartValue': 1500, 'maxCartValue': 1500},
        {'purchaseHistory': {'minOrders': 3, 'maxOrders': 3, 'minTotalSpent': '4000'}},
        {'purchaseHistory': {'firstTime': False}},
        {'minAccountAgeDays': 120, 'maxAccountAgeDays': 120},
        {'geographicLocation': ['in']},
        {'geographicLocation': ['all']},
        {'deviceType': ['mobile', 'tablet']},
        {'userSegments': []},
        {'userSegments': ['Newsletter', 'beta']},
    ])
    def test_passing_rules(self, rules):
        assert EligibilityEvaluator.evaluate(rules, make_context()).eligible

    def test_unknown_device_fails_device_rule(self):
        result = EligibilityEvaluator.evaluate({'deviceType': ['mobile']}, make_context(device=None))
        assert result.failed_rule == 'deviceType'

    def test_date_window(self):
        now = timezone.now()
        context = make_context(now=now)
        future = {'dateWindow': {'start': (now + timedelta(hours=1)).isoformat()}}
        past = {'dateWindow': {'end': (now - timedelta(hours=1)).isoformat()}}
        current = {'dateWindow': {'start': (now - timedelta(hours=1)).isoformat(), 'end': (now + timedelta(hours=1)).isoformat()}}

        assert EligibilityEvaluator.evaluate(future, context).reason == 'Promotion has not started yet'
        assert EligibilityEvaluator.evaluate(past, context).reason == 'Promotion has ended'
        assert EligibilityEvaluator.evaluate(current, context).eligible

    def test_invalid_date_window_raises(self):
        with pytest.raises(ValueError):
            EligibilityEvaluator.evaluate({'dateWindow': {'start': 'next tuesday'}}, make_context())


class TestShortCircuit:

    def test_first_failing_predicate_wins(self):
        rules = {
            'userType': ['new'],
            'minCartValue': 99999,
            'deviceType': ['desktop'],
        }
        result = EligibilityEvaluator.evaluate(rules, make_context())
        assert result.failed_rule == 'userType'

    def test_later_predicates_are_not_evaluated(self, monkeypatch):
        calls = []
        real_check = EligibilityEvaluator._check_deviceType

        def spy(rules, context):
            calls.append('deviceType')
            return real_check(rules, context)

        monkeypatch.setattr(EligibilityEvaluator, '_check_deviceType', staticmethod(spy))

        EligibilityEvaluator.evaluate({'minCartValue': 99999, 'deviceType': ['desktop']}, make_context())
        assert calls == []

        EligibilityEvaluator.evaluate({'deviceType': ['desktop']}, make_context())
        assert calls == ['deviceType']

    @settings(max_examples=100, deadline=None)
    @given(
        cart=st.decimals(min_value=Decimal('0'), max_value=Decimal('5000'), places=2),
        minimum=st.decimals(min_value=Decimal('0'), max_value=Decimal('5000'), places=2),
        maximum=st.decimals(min_value=Decimal('0'), max_value=Decimal('5000'), places=2),
    )
    def test_cart_range_is_a_conjunction(self, cart, minimum, maximum):
        rules = {'minCartValue': str(minimum), 'maxCartValue': str(maximum)}
        result = EligibilityEvaluator.evaluate(rules, make_context(cart_value=cart))
        assert result.eligible == (minimum <= cart <= maximum)
        if cart < minimum:
            assert result.failed_rule == 'minCartValue'


class TestRuleValidation:

    def test_well_formed_rules(self):
        rules = {
            'minCartValue': '100.50',
            'maxCartValue': 5000,
            'userType': 'new',
            'loyaltyTiers': ['gold', 'platinum'],
            'purchaseHistory': {'firstTime': False, 'minOrders': 2, 'minTotalSpent': '250'},
            'minAccountAgeDays': 30,
            'dateWindow': {'start': '2024-11-01T00:00:00Z', 'end': '2024-11-05T00:00:00Z'},
        }
        assert EligibilityEvaluator.rule_errors(rules) == {}

    def test_malformed_values_are_reported_per_rule(self):
        errors = EligibilityEvaluator.rule_errors({
            'minCartValue': 'abc',
            'maxCartValue': True,
            'purchaseHistory': 'yes',
            'maxAccountAgeDays': 2.5,
            'deviceType': {'mobile': True},
            'dateWindow': {'start': 'not-a-date'},
        })
        assert set(errors) == {
            'minCartValue', 'maxCartValue', 'purchaseHistory', 'maxAccountAgeDays', 'deviceType', 'dateWindow'
        }

    @pytest.mark.parametrize('history', [
        {'firstTime': 'yes'},
        {'minOrders': -1},
        {'minTotalSpent': 'NaN'},
        {'lastOrder': '2024-01-01'},
    ])
    def test_purchase_history_values(self, history):
        assert 'purchaseHistory' in EligibilityEvaluator.rule_errors({'purchaseHistory': history})

    def test_date_window_must_be_ordered(self):
        window = {'start': '2024-11-05T00:00:00Z', 'end': '2024-11-01T00:00:00Z'}
        errors = EligibilityEvaluator.rule_errors({'dateWindow': window})
        assert errors == {'dateWindow': 'dateWindow end must be after start'}


@pytest.mark.django_db
class TestCampaignChecks:

    def test_campaign_must_be_running(self):
        context = make_context()
        draft = CampaignFactory.build(status='draft')
        ended = CampaignFactory.build(end_date=timezone.now() - timedelta(minutes=1))
        scheduled_future = CampaignFactory.build(status='scheduled', start_date=timezone.now() + timedelta(days=1))

        for campaign in (draft, ended, scheduled_future):
            result = EligibilityEvaluator.check_campaign(campaign, context)
            assert result.failed_rule == 'campaignWindow'

    def test_target_audience(self):
        campaign = CampaignFactory.build(target_audience='new_users')
        result = EligibilityEvaluator.check_campaign(campaign, make_context())
        assert result.failed_rule == 'targetAudience'
        assert EligibilityEvaluator.check_campaign(campaign, make_context(user_types={'new'})).eligible

    def test_build_context_for_new_member(self, member):
        context = EligibilityEvaluator.build_context(member.user, cart_value='250.00', device='mobile')
        assert context.user_types == {'new'}
        assert context.loyalty_tier == 'bronze'
        assert context.cart_value == Decimal('250.00')
        assert context.country == 'IN'
        assert context.account_age_days == 0

    def test_build_context_for_vip(self, member, loyalty_tiers):
        set_member_state(member, tier=loyalty_tiers['platinum'], orders_count=12, total_spent=Decimal('9000'))
        member.user.groups.add(Group.objects.create(name='Beta'))

        context = EligibilityEvaluator.build_context(member.user)
        assert context.user_types == {'returning', 'vip'}
        assert context.orders_count == 12
        assert context.segments == {'beta'}

    def test_build_context_without_membership(self, db):
        user = UserFactory()
        context = EligibilityEvaluator.build_context(user)
        assert context.loyalty_tier is None
        assert context.user_types == {'new'}
