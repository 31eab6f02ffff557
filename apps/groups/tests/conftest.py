import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.groups.models import Group, GroupMembership, GroupRole


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def group_creator(db):
    """Create and return the user who creates the test group."""
    return User.objects.create_user(
        email='creator@example.com',
        password='TestPass123!',
        display_name='Group Creator',
    )


@pytest.fixture
def admin_user(db):
    """Create and return a user promoted to admin."""
    return User.objects.create_user(
        email='admin@example.com',
        password='TestPass123!',
        display_name='Group Admin',
    )


@pytest.fixture
def member_user(db):
    """Create and return a plain member."""
    return User.objects.create_user(
        email='member@example.com',
        password='TestPass123!',
        display_name='Group Member',
    )


@pytest.fixture
def group_other_user(db):
    """Create and return a user not in any group."""
    return User.objects.create_user(
        email='other@example.com',
        password='TestPass123!',
        display_name='Other User',
    )


def _client_for(api_client, user):
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def authenticated_client(api_client, group_creator):
    """Return API client authenticated as the group creator."""
    return _client_for(api_client, group_creator)


@pytest.fixture
def admin_client(api_client, admin_user):
    """Return API client authenticated as group admin."""
    return _client_for(api_client, admin_user)


@pytest.fixture
def member_client(api_client, member_user):
    """Return API client authenticated as group member."""
    return _client_for(api_client, member_user)


@pytest.fixture
def other_client(api_client, group_other_user):
    """Return API client authenticated as non-member user."""
    return _client_for(api_client, group_other_user)


@pytest.fixture
def group(db, group_creator):
    """Create and return a test group with the creator as admin."""
    group = Group.objects.create(
        name='Flat 4B',
        code='FLAT4B',
        creator=group_creator,
    )
    GroupMembership.objects.create(
        user=group_creator,
        group=group,
        role=GroupRole.ADMIN,
    )
    return group


@pytest.fixture
def group_with_members(group, admin_user, member_user):
    """Group with creator, admin, and member."""
    GroupMembership.objects.create(
        user=admin_user,
        group=group,
        role=GroupRole.ADMIN,
    )
    GroupMembership.objects.create(
        user=member_user,
        group=group,
        role=GroupRole.MEMBER,
    )
    return group
