import pytest
from datetime import datetime, timezone as dt_timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.groups.models import Group, GroupMembership, GroupRole


@pytest.fixture
def june():
    """A moment inside the 2024-06 period."""
    return datetime(2024, 6, 15, 12, 0, tzinfo=dt_timezone.utc)


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


def _make_user(email, name):
    return User.objects.create_user(email=email, password='TestPass123!', display_name=name)


@pytest.fixture
def alice(db):
    return _make_user('alice@example.com', 'Alice')


@pytest.fixture
def bob(db):
    return _make_user('bob@example.com', 'Bob')


@pytest.fixture
def carol(db):
    return _make_user('carol@example.com', 'Carol')


@pytest.fixture
def outsider(db):
    """A user in no group."""
    return _make_user('outsider@example.com', 'Outsider')


@pytest.fixture
def group(db, alice, bob, carol):
    """Alice's group with Bob and Carol as members."""
    group = Group.objects.create(name='Flat 4B', code='FLAT4B', creator=alice)
    GroupMembership.objects.create(user=alice, group=group, role=GroupRole.ADMIN)
    GroupMembership.objects.create(user=bob, group=group, role=GroupRole.MEMBER)
    GroupMembership.objects.create(user=carol, group=group, role=GroupRole.MEMBER)
    return group


def _client_for(api_client, user):
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def authenticated_client(api_client, alice):
    """Return API client authenticated as Alice."""
    return _client_for(api_client, alice)


@pytest.fixture
def bob_client(api_client, bob):
    return _client_for(api_client, bob)


@pytest.fixture
def outsider_client(api_client, outsider):
    return _client_for(api_client, outsider)
