"""
Tests for loyalty accrual, redemption and tier management.
"""
from decimal import Decimal
from io import StringIO

import pytest
from django.core.management import call_command

from apps.common.exceptions import InsufficientPointsError
from apps.loyalty.models import (
    Badge, LoyaltyMember, LoyaltyTier, MemberBadge, PointsTransaction, PurchaseRecord, TierUpgradeLog
)
from apps.loyalty.services import LoyaltyService
from tests.factories import CampaignFactory, UserFactory, set_member_state


@pytest.mark.django_db
class TestTierSetup:

    def test_command_seeds_five_tiers(self, loyalty_tiers):
        assert [tier.name for tier in LoyaltyTier.objects.all()] == ['bronze', 'silver', 'gold', 'platinum', 'diamond']
        assert loyalty_tiers['gold'].min_points == 1500
        assert loyalty_tiers['gold'].min_spending == Decimal('500')
        assert loyalty_tiers['diamond'].points_multiplier == Decimal('3.00')

    def test_command_is_idempotent(self, loyalty_tiers):
        call_command('setup_loyalty_tiers', stdout=StringIO())
        assert LoyaltyTier.objects.count() == 5

    def test_new_user_is_enrolled_at_bronze(self, loyalty_tiers):
        user = UserFactory()
        member = LoyaltyMember.objects.get(user=user)
        assert member.tier.name == 'bronze'
        assert member.points == 0

    def test_user_created_before_tiers_is_enrolled_lazily(self, db):
        user = UserFactory()
        assert not LoyaltyMember.objects.filter(user=user).exists()

        call_command('setup_loyalty_tiers', stdout=StringIO())
        member = LoyaltyService.get_or_create_member(user)
        assert member.tier.name == 'bronze'


@pytest.mark.django_db
class TestProcessOrder:

    def test_credits_points_and_spending(self, member):
        result = LoyaltyService.process_order(member.user, 'A-1', Decimal('1000'))

        member.refresh_from_db()
        assert result['points_earned'] == 100
        assert result['duplicate'] is False
        assert member.points == 100
        assert member.lifetime_points == 100
        assert member.total_spent == Decimal('1000')
        assert member.orders_count == 1

        entry = PointsTransaction.objects.get(member=member)
        assert entry.transaction_type == 'earned'
        assert entry.amount == 100
        assert entry.balance_after == 100
        assert entry.reference_id == 'order_A-1'

    def test_same_order_is_only_credited_once(self, member):
        first = LoyaltyService.process_order(member.user, 'A-1', Decimal('1000'))
        second = LoyaltyService.process_order(member.user, 'A-1', Decimal('1000'))

        member.refresh_from_db()
        assert second['duplicate'] is True
        assert second['points_earned'] == first['points_earned']
        assert member.points == 100
        assert member.orders_count == 1
        assert PurchaseRecord.objects.filter(member=member).count() == 1

    def test_small_order_counts_spending_without_points(self, member):
        result = LoyaltyService.process_order(member.user, 'A-2', Decimal('9.50'))

        member.refresh_from_db()
        assert result['points_earned'] == 0
        assert member.total_spent == Decimal('9.50')
        assert member.orders_count == 1
        assert not PointsTransaction.objects.filter(member=member).exists()

    def test_tier_multiplier_is_applied(self, member, loyalty_tiers):
        set_member_state(member, tier=loyalty_tiers['gold'])
        result = LoyaltyService.process_order(member.user, 'A-3', Decimal('1000'))
        assert result['points_earned'] == 150

    def test_negative_subtotal_is_rejected(self, member):
        with pytest.raises(ValueError):
            LoyaltyService.process_order(member.user, 'A-4', Decimal('-1'))

    def test_upgrade_when_both_thresholds_met(self, member):
        set_member_state(member, points=400, lifetime_points=400)

        result = LoyaltyService.process_order(member.user, 'A-5', Decimal('1500'))

        member.refresh_from_db()
        assert result['tier_updated'] is True
        assert member.tier.name == 'silver'
        assert member.tier_updated_at is not None
        log = TierUpgradeLog.objects.get(member=member)
        assert log.from_tier.name == 'bronze'
        assert log.to_tier.name == 'silver'
        assert log.points_at_change == 550

    def test_upgrade_awards_tier_badge(self, member):
        set_member_state(member, points=400, lifetime_points=400)

        LoyaltyService.process_order(member.user, 'A-8', Decimal('1500'))

        award = MemberBadge.objects.select_related('badge').get(member=member)
        assert award.badge.code == 'tier_silver'
        assert award.badge.name == 'Silver Member'
        assert award.badge.category == 'tier'
        assert award.badge.rarity == 'epic'

    def test_tier_badge_is_awarded_once(self, member, loyalty_tiers):
        badge = Badge.for_tier(loyalty_tiers['silver'])
        assert member.award_badge(badge) is True
        assert member.award_badge(badge) is False
        assert Badge.for_tier(loyalty_tiers['silver']) == badge
        assert member.badges.count() == 1

    def test_points_alone_do_not_upgrade(self, member):
        LoyaltyService.award_bonus_points(member.user, 5000, 'Goodwill')

        member.refresh_from_db()
        assert member.lifetime_points == 5000
        assert member.tier.name == 'bronze'
        assert not TierUpgradeLog.objects.filter(member=member).exists()

    def test_spending_alone_does_not_upgrade(self, member):
        # 150 points from a 1500 order, well below Silver's 500
        LoyaltyService.process_order(member.user, 'A-6', Decimal('1500'))

        member.refresh_from_db()
        assert member.total_spent == Decimal('1500')
        assert member.tier.name == 'bronze'

    def test_tier_is_never_lowered(self, member, loyalty_tiers):
        set_member_state(member, tier=loyalty_tiers['gold'])

        LoyaltyService.process_order(member.user, 'A-7', Decimal('100'))

        member.refresh_from_db()
        assert member.tier.name == 'gold'

    def test_spin_token_awarded_when_crossing_threshold(self, member):
        set_member_state(member, points=450, lifetime_points=450)

        result = LoyaltyService.process_order(member.user, 'A-8', Decimal('1000'))

        member.refresh_from_db()
        assert member.lifetime_points == 550
        assert member.available_spins == 1
        assert member.spin_tokens_awarded == 1
        assert result['available_spins'] == 1

    def test_loyalty_boost_campaign_multiplies_points(self, member):
        campaign = CampaignFactory(campaign_type='loyalty_boost', points_multiplier=Decimal('2'))

        result = LoyaltyService.process_order(member.user, 'A-9', Decimal('1000'))

        assert result['points_earned'] == 200
        assert result['boost_multiplier'] == Decimal('2')
        assert PointsTransaction.objects.get(member=member).campaign == campaign

    def test_boost_requires_eligibility(self, member):
        CampaignFactory(
            campaign_type='loyalty_boost',
            points_multiplier=Decimal('2'),
            eligibility_rules={'loyaltyTiers': ['gold', 'platinum']},
        )

        result = LoyaltyService.process_order(member.user, 'A-10', Decimal('1000'))
        assert result['points_earned'] == 100

    def test_paused_boost_is_ignored(self, member):
        CampaignFactory(campaign_type='loyalty_boost', points_multiplier=Decimal('3'), status='paused')

        result = LoyaltyService.process_order(member.user, 'A-11', Decimal('1000'))
        assert result['points_earned'] == 100


@pytest.mark.django_db
class TestRedemption:

    def test_redeem_converts_points_to_discount(self, member):
        set_member_state(member, points=1000, lifetime_points=1000)

        result = LoyaltyService.redeem_points(member.user, 500, order_id='B-1')

        member.refresh_from_db()
        assert result['discount_amount'] == Decimal('5.00')
        assert result['remaining_points'] == 500
        assert member.points == 500
        assert member.lifetime_points == 1000
        entry = PointsTransaction.objects.get(member=member)
        assert entry.amount == -500
        assert entry.transaction_type == 'redeemed'

    def test_below_minimum_is_rejected(self, member):
        set_member_state(member, points=1000, lifetime_points=1000)
        with pytest.raises(InsufficientPointsError) as excinfo:
            LoyaltyService.redeem_points(member.user, 50)
        assert excinfo.value.code == 'below_minimum'

    def test_more_than_balance_is_rejected(self, member):
        set_member_state(member, points=200, lifetime_points=200)
        with pytest.raises(InsufficientPointsError):
            LoyaltyService.redeem_points(member.user, 300)

        member.refresh_from_db()
        assert member.points == 200

    def test_redeeming_does_not_lower_tier(self, member, loyalty_tiers):
        set_member_state(member, tier=loyalty_tiers['silver'], points=600, lifetime_points=600, total_spent=Decimal('300'))

        LoyaltyService.redeem_points(member.user, 500)
        LoyaltyService.process_order(member.user, 'B-2', Decimal('10'))

        member.refresh_from_db()
        assert member.points == 101
        assert member.tier.name == 'silver'


@pytest.mark.django_db
class TestTierProgressAndAnalytics:

    def test_progress_toward_next_tier(self, member):
        set_member_state(member, lifetime_points=250, total_spent=Decimal('150'))

        progress = LoyaltyService.tier_progress(member)

        assert progress['next_tier'] == 'silver'
        assert progress['progress'] == Decimal('50.00')
        assert progress['points_needed'] == 250
        assert progress['spending_needed'] == Decimal('50')

    def test_top_tier_has_no_next_tier(self, member, loyalty_tiers):
        set_member_state(member, tier=loyalty_tiers['diamond'])
        progress = LoyaltyService.tier_progress(member)
        assert progress['next_tier'] is None
        assert progress['progress'] is None

    def test_analytics_counts_points(self, member):
        LoyaltyService.award_bonus_points(member.user, 300, 'Welcome bonus')
        LoyaltyService.redeem_points(member.user, 100)

        analytics = LoyaltyService.get_analytics()

        assert analytics['total_members'] == 1
        assert analytics['points_issued'] == 300
        assert analytics['points_redeemed'] == 100
        assert analytics['outstanding_points'] == 200


@pytest.mark.django_db
class TestLeaderboard:

    def test_ordered_by_lifetime_points(self, member):
        runner_up = UserFactory().loyalty_member
        leader = UserFactory().loyalty_member
        set_member_state(member, lifetime_points=100)
        set_member_state(runner_up, lifetime_points=700, total_spent=Decimal('50'))
        set_member_state(leader, lifetime_points=700, total_spent=Decimal('900'))

        board = list(LoyaltyService.leaderboard())

        assert board == [leader, runner_up, member]

    def test_limit(self, member):
        UserFactory()
        UserFactory()
        assert len(LoyaltyService.leaderboard(limit=2)) == 2
