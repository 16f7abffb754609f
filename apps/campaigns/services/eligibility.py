"""
Campaign eligibility evaluation.

Rules are independent predicates combined with AND. They are checked in a
fixed order and evaluation stops at the first one that fails, so the result
always names a single failing rule.
"""
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from datetime import datetime
from typing import Any, Dict, Optional, Set

from django.utils import timezone
from django.utils.dateparse import parse_datetime

from apps.common.utils import to_decimal

WILDCARD = 'all'
VIP_TIERS = {'platinum', 'diamond'}

AUDIENCE_USER_TYPES = {
    'new_users': 'new',
    'returning_users': 'returning',
    'vip': 'vip',
}


@dataclass
class EligibilityContext:
    """Facts about a shopper that campaign rules are evaluated against"""
    user_types: Set[str] = field(default_factory=set)
    loyalty_tier: Optional[str] = None
    cart_value: Decimal = Decimal('0')
    orders_count: int = 0
    total_spent: Decimal = Decimal('0')
    account_age_days: int = 0
    country: Optional[str] = None
    device: Optional[str] = None
    segments: Set[str] = field(default_factory=set)
    now: Optional[datetime] = None

    def __post_init__(self):
        self.cart_value = to_decimal(self.cart_value)
        self.total_spent = to_decimal(self.total_spent)
        if self.now is None:
            self.now = timezone.now()


@dataclass
class EligibilityResult:
    eligible: bool
    failed_rule: Optional[str] = None
    reason: Optional[str] = None

    def __bool__(self):
        return self.eligible

    def to_dict(self) -> Dict[str, Any]:
        return {
            'eligible': self.eligible,
            'failed_rule': self.failed_rule,
            'reason': self.reason,
        }


def _as_list(value):
    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return [str(item).lower() for item in value]
    return [str(value).lower()]


def _parse_moment(value):
    if isinstance(value, datetime):
        moment = value
    else:
        moment = parse_datetime(str(value))
        if moment is None:
            raise ValueError(f"Invalid datetime in eligibility rules: {value!r}")
    if timezone.is_naive(moment):
        moment = timezone.make_aware(moment)
    return moment


def _amount_error(value):
    if isinstance(value, bool):
        return 'must be a number'
    try:
        amount = to_decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        return 'must be a number'
    if not amount.is_finite() or amount < 0:
        return 'must be a non-negative number'
    return None


def _count_error(value):
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return 'must be a non-negative integer'
    return None


class EligibilityEvaluator:
    """Evaluate a campaign's eligibility_rules against an EligibilityContext"""

    PREDICATES = (
        'dateWindow',
        'userType',
        'loyaltyTiers',
        'minCartValue',
        'maxCartValue',
        'purchaseHistory',
        'accountAge',
        'geographicLocation',
        'deviceType',
        'userSegments',
    )

    @classmethod
    def evaluate(cls, rules, context):
        """Return the first failing predicate, or an eligible result"""
        rules = rules or {}
        for name in cls.PREDICATES:
            check = getattr(cls, f'_check_{name}')
            reason = check(rules, context)
            if reason:
                return EligibilityResult(False, failed_rule=name, reason=reason)
        return EligibilityResult(True)

    @classmethod
    def check_campaign(cls, campaign, context):
        """Campaign must be running, match its audience and satisfy its rules"""
        if not campaign.is_running(context.now):
            return EligibilityResult(False, failed_rule='campaignWindow', reason='Campaign is not running')

        audience_type = AUDIENCE_USER_TYPES.get(campaign.target_audience)
        if audience_type and audience_type not in context.user_types:
            return EligibilityResult(
                False,
                failed_rule='targetAudience',
                reason=f'Campaign is limited to {campaign.get_target_audience_display()}',
            )

        return cls.evaluate(campaign.eligibility_rules, context)

    LIST_RULES = ('userType', 'loyaltyTiers', 'geographicLocation', 'deviceType', 'userSegments')
    HISTORY_KEYS = ('firstTime', 'minOrders', 'maxOrders', 'minTotalSpent')

    @classmethod
    def rule_errors(cls, rules):
        """
        Check the values of an eligibility_rules object.

        Returns a dict mapping each malformed rule to a message; empty when
        every rule can be evaluated.
        """
        errors = {}

        for key in ('minCartValue', 'maxCartValue'):
            if rules.get(key) is not None:
                error = _amount_error(rules[key])
                if error:
                    errors[key] = f'{key} {error}'

        for key in ('minAccountAgeDays', 'maxAccountAgeDays'):
            if rules.get(key) is not None:
                error = _count_error(rules[key])
                if error:
                    errors[key] = f'{key} {error}'

        for key in cls.LIST_RULES:
            value = rules.get(key)
            if value is None or isinstance(value, str):
                continue
            if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
                errors[key] = f'{key} must be a string or a list of strings'

        history = rules.get('purchaseHistory')
        if history is not None:
            if not isinstance(history, dict):
                errors['purchaseHistory'] = 'purchaseHistory must be an object'
            else:
                unknown = set(history) - set(cls.HISTORY_KEYS)
                if unknown:
                    errors['purchaseHistory'] = f"Unknown purchaseHistory keys: {', '.join(sorted(unknown))}"
                elif 'firstTime' in history and not isinstance(history['firstTime'], bool):
                    errors['purchaseHistory'] = 'firstTime must be true or false'
                else:
                    for key in ('minOrders', 'maxOrders'):
                        if history.get(key) is not None and _count_error(history[key]):
                            errors['purchaseHistory'] = f'{key} {_count_error(history[key])}'
                    if history.get('minTotalSpent') is not None and _amount_error(history['minTotalSpent']):
                        errors['purchaseHistory'] = f"minTotalSpent {_amount_error(history['minTotalSpent'])}"

        window = rules.get('dateWindow')
        if window is not None:
            if not isinstance(window, dict) or set(window) - {'start', 'end'}:
                errors['dateWindow'] = 'dateWindow must be an object with start and end'
            else:
                try:
                    start = _parse_moment(window['start']) if window.get('start') else None
                    end = _parse_moment(window['end']) if window.get('end') else None
                except ValueError:
                    errors['dateWindow'] = 'dateWindow dates must be ISO 8601 datetimes'
                else:
                    if start and end and start >= end:
                        errors['dateWindow'] = 'dateWindow end must be after start'

        return errors

    @staticmethod
    def build_context(user, cart_value=0, device=None, now=None, segments=None):
        """Derive the evaluation context for a user from their loyalty membership"""
        from apps.loyalty.models import LoyaltyMember

        now = now or timezone.now()
        member = LoyaltyMember.objects.filter(user=user).select_related('tier').first()
        orders_count = member.orders_count if member else 0
        tier = member.tier.name if member else None

        user_types = {'new'} if orders_count == 0 else {'returning'}
        if tier in VIP_TIERS:
            user_types.add('vip')

        if segments is None:
            segments = set(user.groups.values_list('name', flat=True))

        return EligibilityContext(
            user_types=user_types,
            loyalty_tier=tier,
            cart_value=cart_value,
            orders_count=orders_count,
            total_spent=member.total_spent if member else Decimal('0'),
            account_age_days=user.account_age_days(now),
            country=user.country or None,
            device=device,
            segments={segment.lower() for segment in segments},
            now=now,
        )

    # Predicates return a reason string when the rule fails, None otherwise

    @staticmethod
    def _check_dateWindow(rules, context):
        window = rules.get('dateWindow')
        if not window:
            return None
        start = window.get('start')
        end = window.get('end')
        if start and context.now < _parse_moment(start):
            return 'Promotion has not started yet'
        if end and context.now >= _parse_moment(end):
            return 'Promotion has ended'
        return None

    @staticmethod
    def _check_userType(rules, context):
        allowed = _as_list(rules.get('userType'))
        if not allowed or WILDCARD in allowed:
            return None
        if not context.user_types & set(allowed):
            return 'Promotion is not available for your account type'
        return None

    @staticmethod
    def _check_loyaltyTiers(rules, context):
        allowed = _as_list(rules.get('loyaltyTiers'))
        if not allowed or WILDCARD in allowed:
            return None
        if context.loyalty_tier not in allowed:
            return 'Promotion requires a higher loyalty tier'
        return None

    @staticmethod
    def _check_minCartValue(rules, context):
        minimum = rules.get('minCartValue')
        if minimum is not None and context.cart_value < to_decimal(minimum):
            return f'Minimum cart value of {minimum} required'
        return None

    @staticmethod
    def _check_maxCartValue(rules, context):
        maximum = rules.get('maxCartValue')
        if maximum is not None and context.cart_value > to_decimal(maximum):
            return f'Cart value must not exceed {maximum}'
        return None

    @staticmethod
    def _check_purchaseHistory(rules, context):
        history = rules.get('purchaseHistory')
        if not history:
            return None
        if history.get('firstTime') and context.orders_count > 0:
            return 'Promotion is for first-time customers only'
        min_orders = history.get('minOrders')
        if min_orders is not None and context.orders_count < int(min_orders):
            return f'At least {min_orders} previous orders required'
        max_orders = history.get('maxOrders')
        if max_orders is not None and context.orders_count > int(max_orders):
            return f'Promotion is limited to customers with at most {max_orders} orders'
        min_spent = history.get('minTotalSpent')
        if min_spent is not None and context.total_spent < to_decimal(min_spent):
            return f'Total spending of {min_spent} required'
        return None

    @staticmethod
    def _check_accountAge(rules, context):
        min_age = rules.get('minAccountAgeDays')
        if min_age is not None and context.account_age_days < int(min_age):
            return f'Account must be at least {min_age} days old'
        max_age = rules.get('maxAccountAgeDays')
        if max_age is not None and context.account_age_days > int(max_age):
            return f'Promotion is for accounts newer than {max_age} days'
        return None

    @staticmethod
    def _check_geographicLocation(rules, context):
        allowed = _as_list(rules.get('geographicLocation'))
        if not allowed or WILDCARD in allowed:
            return None
        if not context.country or context.country.lower() not in allowed:
            return 'Promotion is not available in your region'
        return None

    @staticmethod
    def _check_deviceType(rules, context):
        allowed = _as_list(rules.get('deviceType'))
        if not allowed or WILDCARD in allowed:
            return None
        if not context.device or context.device.lower() not in allowed:
            return 'Promotion is not available on this device'
        return None

    @staticmethod
    def _check_userSegments(rules, context):
        required = _as_list(rules.get('userSegments'))
        if not required:
            return None
        if not context.segments & set(required):
            return 'Promotion is limited to selected customers'
        return None
