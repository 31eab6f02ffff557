import pytest
from datetime import datetime, timezone as dt_timezone
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.budgets.models import Budget


@pytest.fixture
def june():
    """A moment inside the 2024-06 period."""
    return datetime(2024, 6, 15, 12, 0, tzinfo=dt_timezone.utc)


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a test user."""
    return User.objects.create_user(
        email='testuser@example.com',
        password='TestPass123!',
        display_name='Test User',
    )


@pytest.fixture
def other_user(db):
    return User.objects.create_user(
        email='other@example.com',
        password='TestPass123!',
        display_name='Other User',
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Return an authenticated API client using JWT."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def food_budget(user):
    """1000.00 for Food in June 2024, warning at 80%."""
    return Budget.objects.create(
        user=user,
        category='Food',
        period='2024-06',
        limit=Decimal('1000.00'),
        alert_threshold_pct=80,
    )
