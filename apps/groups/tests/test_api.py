import pytest
from decimal import Decimal
from django.urls import reverse
from rest_framework import status
from apps.expenses.services import create_expense
from apps.groups.models import Group, GroupMembership, GroupRole
from apps.ledger.models import Settlement, SettlementStatus


# =============================================================================
# Group CRUD Tests
# =============================================================================

@pytest.mark.django_db
class TestGroupList:
    """Tests for GET /api/groups/"""

    def test_list_groups_returns_user_groups(self, authenticated_client, group):
        """List returns only groups where user is a member."""
        url = reverse('groups:group-list')
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert 'results' in response.data
        assert len(response.data['results']) == 1
        assert response.data['results'][0]['name'] == group.name
        assert response.data['results'][0]['user_role'] == GroupRole.ADMIN

    def test_list_groups_excludes_non_member_groups(self, other_client, group):
        """Non-members don't see group in list."""
        url = reverse('groups:group-list')
        response = other_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data['results']) == 0

    def test_list_groups_unauthenticated(self, api_client):
        url = reverse('groups:group-list')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestGroupCreate:
    """Tests for POST /api/groups/"""

    def test_create_group(self, authenticated_client, group_creator):
        url = reverse('groups:group-list')
        response = authenticated_client.post(url, {'name': 'Ski Trip'})

        assert response.status_code == status.HTTP_201_CREATED
        assert len(response.data['code']) == 6
        assert response.data['member_count'] == 1

        group = Group.objects.get(name='Ski Trip')
        assert group.creator == group_creator
        assert group.get_user_role(group_creator) == GroupRole.ADMIN

    def test_create_group_with_taken_code(self, authenticated_client, group):
        url = reverse('groups:group-list')
        response = authenticated_client.post(url, {'name': 'Clash', 'code': group.code})

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['code'] == 'group_code_taken'

    def test_create_group_missing_name(self, authenticated_client):
        url = reverse('groups:group-list')
        response = authenticated_client.post(url, {})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'name' in response.data


@pytest.mark.django_db
class TestGroupDetail:
    """Tests for GET/PATCH/DELETE /api/groups/{id}/"""

    def test_retrieve_group_as_member(self, member_client, group_with_members):
        url = reverse('groups:group-detail', kwargs={'pk': group_with_members.id})
        response = member_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['member_count'] == 3
        assert response.data['user_role'] == GroupRole.MEMBER

    def test_retrieve_group_non_member(self, other_client, group):
        url = reverse('groups:group-detail', kwargs={'pk': group.id})
        response = other_client.get(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data['code'] == 'not_member'

    def test_rename_group_as_admin(self, admin_client, group_with_members):
        url = reverse('groups:group-detail', kwargs={'pk': group_with_members.id})
        response = admin_client.patch(url, {'name': 'Flat 4C'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['name'] == 'Flat 4C'

    def test_rename_group_as_member(self, member_client, group_with_members):
        url = reverse('groups:group-detail', kwargs={'pk': group_with_members.id})
        response = member_client.patch(url, {'name': 'Nope'})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_delete_group_as_creator(self, authenticated_client, group):
        url = reverse('groups:group-detail', kwargs={'pk': group.id})
        response = authenticated_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Group.objects.filter(id=group.id).exists()

    def test_delete_group_as_admin(self, admin_client, group_with_members):
        """Only the creator can delete, not other admins."""
        url = reverse('groups:group-detail', kwargs={'pk': group_with_members.id})
        response = admin_client.delete(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert Group.objects.filter(id=group_with_members.id).exists()


# =============================================================================
# Membership Tests
# =============================================================================

@pytest.mark.django_db
class TestMembership:
    """Tests for join, leave and member management endpoints."""

    def test_join_group_by_code(self, other_client, group, group_other_user):
        url = reverse('groups:group-join')
        response = other_client.post(url, {'code': group.code.lower()})

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['id'] == str(group.id)
        assert group.has_member(group_other_user)

    def test_join_group_unknown_code(self, other_client, group):
        url = reverse('groups:group-join')
        response = other_client.post(url, {'code': 'ZZZZZZ'})

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_join_group_twice(self, authenticated_client, group):
        url = reverse('groups:group-join')
        response = authenticated_client.post(url, {'code': group.code})

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['code'] == 'already_member'

    def test_leave_group(self, member_client, group_with_members, member_user):
        url = reverse('groups:group-leave', kwargs={'pk': group_with_members.id})
        response = member_client.post(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not group_with_members.has_member(member_user)

    def test_creator_cannot_leave(self, authenticated_client, group):
        url = reverse('groups:group-leave', kwargs={'pk': group.id})
        response = authenticated_client.post(url)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['code'] == 'creator_cannot_leave'

    def test_list_members(self, member_client, group_with_members):
        url = reverse('groups:group-members', kwargs={'pk': group_with_members.id})
        response = member_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 3

    def test_add_member(self, authenticated_client, group, group_other_user):
        url = reverse('groups:group-add-member', kwargs={'pk': group.id})
        response = authenticated_client.post(url, {'user_id': str(group_other_user.id)})

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['role'] == GroupRole.MEMBER
        assert group.has_member(group_other_user)

    def test_remove_member(self, authenticated_client, group_with_members, member_user):
        url = reverse('groups:group-remove-member', kwargs={'pk': group_with_members.id})
        response = authenticated_client.delete(url, {'user_id': str(member_user.id)}, format='json')

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not GroupMembership.objects.filter(group=group_with_members, user=member_user).exists()

    def test_update_member_role(self, authenticated_client, group_with_members, member_user):
        url = reverse('groups:group-update-member-role', kwargs={'pk': group_with_members.id})
        response = authenticated_client.post(
            url, {'user_id': str(member_user.id), 'role': GroupRole.ADMIN}
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['role'] == GroupRole.ADMIN

    def test_update_member_role_invalid(self, authenticated_client, group_with_members, member_user):
        url = reverse('groups:group-update-member-role', kwargs={'pk': group_with_members.id})
        response = authenticated_client.post(url, {'user_id': str(member_user.id), 'role': 'owner'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST


# =============================================================================
# Group Ledger Tests
# =============================================================================

@pytest.mark.django_db
class TestGroupLedger:
    """Tests for group expenses, debts and settlements endpoints."""

    @pytest.fixture
    def dinner(self, group_with_members, group_creator, admin_user, member_user):
        return create_expense(
            payer=group_creator,
            title='Dinner',
            amount=Decimal('300.00'),
            category='Food',
            group_id=group_with_members.id,
            obligated_member_ids=[group_creator.id, admin_user.id, member_user.id],
        )

    def test_group_expenses(self, member_client, group_with_members, dinner):
        url = reverse('groups:group-expenses', kwargs={'pk': group_with_members.id})
        response = member_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1
        assert response.data[0]['title'] == 'Dinner'
        assert len(response.data[0]['shares']) == 3

    def test_group_debts(self, member_client, group_with_members, dinner, group_creator):
        url = reverse('groups:group-debts', kwargs={'pk': group_with_members.id})
        response = member_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 2
        for debt in response.data:
            assert debt['to_user']['id'] == str(group_creator.id)
            assert Decimal(debt['amount']) == Decimal('100.00')

    def test_group_debts_non_member(self, other_client, group_with_members, dinner):
        url = reverse('groups:group-debts', kwargs={'pk': group_with_members.id})
        response = other_client.get(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_record_and_list_settlements(self, member_client, group_with_members, dinner, member_user, group_creator):
        url = reverse('groups:group-settlements', kwargs={'pk': group_with_members.id})
        response = member_client.post(
            url,
            {'to_user_id': str(group_creator.id), 'amount': '100.00', 'description': 'Dinner'},
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['from_user']['id'] == str(member_user.id)
        assert response.data['status'] == SettlementStatus.PENDING

        response = member_client.get(url)
        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1
        assert Settlement.objects.filter(group=group_with_members).count() == 1
