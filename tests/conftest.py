"""
Test configuration for the promotions server.
"""
import os
from io import StringIO

import pytest
from django.core.management import call_command
from rest_framework.test import APIClient


def pytest_configure():
    """Select the test settings before Django is set up."""
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'promo_server.settings.test')
    os.environ.setdefault('ENVIRONMENT', 'test')


def seed_loyalty_tiers():
    """Create the five loyalty tiers and return them by name."""
    from apps.loyalty.models import LoyaltyTier

    call_command('setup_loyalty_tiers', stdout=StringIO())
    return {tier.name: tier for tier in LoyaltyTier.objects.all()}


@pytest.fixture
def loyalty_tiers(db):
    """All loyalty tiers keyed by name."""
    return seed_loyalty_tiers()


@pytest.fixture
def member(loyalty_tiers):
    """A Bronze member with no history."""
    from tests.factories import UserFactory
    return UserFactory().loyalty_member


@pytest.fixture
def admin_user(loyalty_tiers):
    from tests.factories import UserFactory
    return UserFactory(role='admin')


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def auth_client(member):
    """API client authenticated as the `member` fixture's user."""
    client = APIClient()
    client.force_authenticate(user=member.user)
    return client


@pytest.fixture
def admin_client(admin_user):
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client
