"""
Service layer unit tests for groups app.

Tests cover:
- Group code generation and collisions
- Membership and role rules
- The delete cascade across expenses, settlements and budgets
- Error handling
"""

import pytest
from datetime import datetime, timezone as dt_timezone
from decimal import Decimal
from uuid import uuid4
from unittest.mock import patch

from apps.budgets.models import Budget
from apps.expenses.models import Expense, ExpenseShare
from apps.expenses.services import create_expense
from apps.groups.models import Group, GroupMembership, GroupRole
from apps.groups.services import (
    create_group,
    get_group_by_id,
    list_user_groups,
    update_group,
    delete_group,
    require_membership,
    join_group_by_code,
    leave_group,
    add_member,
    remove_member,
    get_group_members,
    update_member_role,
    generate_group_code,
)
from apps.groups.services.exceptions import (
    GroupNotFoundError,
    GroupCodeTakenError,
    GroupCodeExhaustedError,
    InvalidGroupCodeError,
    AlreadyMemberError,
    NotMemberError,
    MemberNotFoundError,
    InsufficientPermissionsError,
    CreatorCannotLeaveError,
    CannotChangeCreatorRoleError,
    CannotRemoveCreatorError,
    UserNotFoundError,
)
from apps.common.exceptions import ValidationError
from apps.ledger.models import Settlement

JUNE = datetime(2024, 6, 15, 12, 0, tzinfo=dt_timezone.utc)


# =============================================================================
# Group Management Service Tests
# =============================================================================

@pytest.mark.django_db
class TestGroupManagement:
    """Tests for group_management.py service functions."""

    def test_create_group_success(self, group_creator):
        """Creating a group also creates the creator's admin membership."""
        group = create_group(name="Trip to Porto", creator=group_creator)

        assert group.name == "Trip to Porto"
        assert group.creator == group_creator
        assert len(group.code) == 6
        assert group.code.isupper() or group.code.isdigit()

        membership = GroupMembership.objects.get(group=group, user=group_creator)
        assert membership.role == GroupRole.ADMIN

    def test_generated_code_uses_letters_and_digits(self):
        code = generate_group_code()

        assert len(code) == 6
        assert all(ch.isdigit() or ('A' <= ch <= 'Z') for ch in code)

    def test_create_group_with_custom_code(self, group_creator):
        """A custom code is normalized to upper case."""
        group = create_group(name="Porto", creator=group_creator, code=" porto1 ")

        assert group.code == "PORTO1"

    def test_create_group_custom_code_taken(self, group, group_creator):
        with pytest.raises(GroupCodeTakenError):
            create_group(name="Copy", creator=group_creator, code=group.code)

    def test_create_group_custom_code_malformed(self, group_creator):
        with pytest.raises(InvalidGroupCodeError):
            create_group(name="Bad", creator=group_creator, code="AB-12!")

    def test_create_group_blank_name(self, group_creator):
        with pytest.raises(ValidationError):
            create_group(name="   ", creator=group_creator)

    def test_create_group_gives_up_when_codes_keep_colliding(self, group_creator):
        """Generation stops after the attempt limit if every code collides."""
        with patch('apps.groups.services.group_management.secrets.choice') as mock_choice:
            mock_choice.return_value = 'A'

            first = create_group(name="Group 1", creator=group_creator)
            assert first.code == 'AAAAAA'

            with pytest.raises(GroupCodeExhaustedError, match="unable to generate unique code"):
                create_group(name="Group 2", creator=group_creator)

        assert Group.objects.filter(creator=group_creator).count() == 1

    def test_create_group_zero_attempts(self, group_creator):
        """An explicit attempt limit of zero is honoured, not replaced by the default."""
        with pytest.raises(GroupCodeExhaustedError):
            create_group(name="Group 1", creator=group_creator, max_attempts=0)

        assert not Group.objects.filter(creator=group_creator).exists()

    def test_get_group_by_id_success(self, group):
        retrieved = get_group_by_id(group_id=group.id)

        assert retrieved.id == group.id
        assert retrieved.name == group.name

    def test_get_group_by_id_not_found(self):
        """Raises GroupNotFoundError if group doesn't exist."""
        with pytest.raises(GroupNotFoundError):
            get_group_by_id(group_id=uuid4())

    def test_list_user_groups(self, group, group_creator, group_other_user):
        assert list(list_user_groups(user=group_creator)) == [group]
        assert list(list_user_groups(user=group_other_user)) == []

    def test_update_group_success(self, group, group_creator):
        """Admin can rename the group."""
        updated = update_group(group_id=group.id, user=group_creator, name="Flat 4C")

        assert updated.name == "Flat 4C"

    def test_update_group_member_cannot_rename(self, group_with_members, member_user):
        with pytest.raises(InsufficientPermissionsError):
            update_group(group_id=group_with_members.id, user=member_user, name="Mine now")

    def test_delete_group_only_creator(self, group_with_members, admin_user):
        """Admins who are not the creator cannot delete the group."""
        with pytest.raises(InsufficientPermissionsError):
            delete_group(group_id=group_with_members.id, user=admin_user)

        assert Group.objects.filter(id=group_with_members.id).exists()

    def test_delete_group_cascades(self, group_with_members, group_creator, member_user):
        """Deleting a group removes its expenses and settlements and reverses budgets."""
        budget = Budget.objects.create(
            user=group_creator,
            category='Food',
            period='2024-06',
            limit=Decimal('1000.00'),
        )
        create_expense(
            payer=group_creator,
            title="Groceries",
            amount=Decimal('90.00'),
            category='Food',
            group_id=group_with_members.id,
            obligated_member_ids=[group_creator.id, member_user.id],
            created_at=JUNE,
        )
        personal = create_expense(
            payer=group_creator,
            title="Lunch",
            amount=Decimal('10.00'),
            category='Food',
            created_at=JUNE,
        )
        Settlement.objects.create(
            group=group_with_members,
            from_user=member_user,
            to_user=group_creator,
            amount=Decimal('45.00'),
        )
        budget.refresh_from_db()
        assert budget.spent_this_period == Decimal('100.00')

        delete_group(group_id=group_with_members.id, user=group_creator)

        assert not Group.objects.filter(id=group_with_members.id).exists()
        assert not Expense.objects.filter(group_id=group_with_members.id).exists()
        assert not ExpenseShare.objects.filter(expense__group_id=group_with_members.id).exists()
        assert not Settlement.objects.filter(group_id=group_with_members.id).exists()
        assert not GroupMembership.objects.filter(group_id=group_with_members.id).exists()
        # Personal expenses survive and keep their share of the counter.
        assert Expense.objects.filter(id=personal.id).exists()
        budget.refresh_from_db()
        assert budget.spent_this_period == Decimal('10.00')


# =============================================================================
# Membership Management Service Tests
# =============================================================================

@pytest.mark.django_db
class TestMembershipManagement:
    """Tests for membership_management.py service functions."""

    def test_require_membership(self, group, group_creator, group_other_user):
        assert require_membership(group_id=group.id, user=group_creator) == group

        with pytest.raises(NotMemberError):
            require_membership(group_id=group.id, user=group_other_user)

        with pytest.raises(GroupNotFoundError):
            require_membership(group_id=uuid4(), user=group_creator)

    def test_join_group_by_code_success(self, group, group_other_user):
        """User can join a group with its code, in any case."""
        membership = join_group_by_code(code=group.code.lower(), user=group_other_user)

        assert membership.user == group_other_user
        assert membership.group == group
        assert membership.role == GroupRole.MEMBER

    def test_join_group_unknown_code(self, group, group_other_user):
        with pytest.raises(GroupNotFoundError):
            join_group_by_code(code="ZZZZZZ", user=group_other_user)

    def test_join_group_malformed_code(self, group, group_other_user):
        with pytest.raises(GroupNotFoundError):
            join_group_by_code(code="no", user=group_other_user)

    def test_join_group_already_member(self, group, group_creator):
        with pytest.raises(AlreadyMemberError):
            join_group_by_code(code=group.code, user=group_creator)

    def test_leave_group_success(self, group_with_members, member_user):
        leave_group(group_id=group_with_members.id, user=member_user)

        assert not GroupMembership.objects.filter(
            group=group_with_members,
            user=member_user
        ).exists()

    def test_leave_group_creator_cannot_leave(self, group, group_creator):
        with pytest.raises(CreatorCannotLeaveError):
            leave_group(group_id=group.id, user=group_creator)

    def test_leave_group_not_member(self, group, group_other_user):
        with pytest.raises(NotMemberError):
            leave_group(group_id=group.id, user=group_other_user)

    def test_add_member_success(self, group, group_creator, group_other_user):
        membership = add_member(
            group_id=group.id,
            user_id=group_other_user.id,
            added_by=group_creator,
        )

        assert membership.role == GroupRole.MEMBER
        assert group.has_member(group_other_user)

    def test_add_member_requires_admin(self, group_with_members, member_user, group_other_user):
        with pytest.raises(InsufficientPermissionsError):
            add_member(
                group_id=group_with_members.id,
                user_id=group_other_user.id,
                added_by=member_user,
            )

    def test_add_member_unknown_user(self, group, group_creator):
        with pytest.raises(UserNotFoundError):
            add_member(group_id=group.id, user_id=uuid4(), added_by=group_creator)

    def test_add_member_already_member(self, group_with_members, group_creator, member_user):
        with pytest.raises(AlreadyMemberError):
            add_member(
                group_id=group_with_members.id,
                user_id=member_user.id,
                added_by=group_creator,
            )

    def test_remove_member_success(self, group_with_members, admin_user, member_user):
        """Any admin can remove a member."""
        remove_member(
            group_id=group_with_members.id,
            user_id=member_user.id,
            removed_by=admin_user
        )

        assert not group_with_members.has_member(member_user)

    def test_remove_member_cannot_remove_creator(self, group_with_members, admin_user, group_creator):
        with pytest.raises(CannotRemoveCreatorError):
            remove_member(
                group_id=group_with_members.id,
                user_id=group_creator.id,
                removed_by=admin_user
            )

    def test_remove_member_not_in_group(self, group, group_creator, group_other_user):
        with pytest.raises(MemberNotFoundError):
            remove_member(
                group_id=group.id,
                user_id=group_other_user.id,
                removed_by=group_creator
            )

    def test_get_group_members_success(self, group_with_members, member_user):
        """Any member can list the members."""
        members = get_group_members(group_id=group_with_members.id, requester=member_user)

        assert members.count() == 3
        assert sum(1 for m in members if m.role == GroupRole.ADMIN) == 2
        assert sum(1 for m in members if m.role == GroupRole.MEMBER) == 1

    def test_get_group_members_non_member(self, group, group_other_user):
        with pytest.raises(NotMemberError):
            get_group_members(group_id=group.id, requester=group_other_user)


# =============================================================================
# Role Management Service Tests
# =============================================================================

@pytest.mark.django_db
class TestRoleManagement:
    """Tests for role_management.py service functions."""

    def test_update_member_role_success(self, group_with_members, group_creator, member_user):
        updated = update_member_role(
            group_id=group_with_members.id,
            user_id=member_user.id,
            new_role=GroupRole.ADMIN,
            updated_by=group_creator
        )

        assert updated.role == GroupRole.ADMIN

    def test_update_member_role_cannot_change_creator(self, group_with_members, admin_user, group_creator):
        with pytest.raises(CannotChangeCreatorRoleError):
            update_member_role(
                group_id=group_with_members.id,
                user_id=group_creator.id,
                new_role=GroupRole.MEMBER,
                updated_by=admin_user
            )

    def test_update_member_role_insufficient_permissions(self, group_with_members, member_user, admin_user):
        with pytest.raises(InsufficientPermissionsError):
            update_member_role(
                group_id=group_with_members.id,
                user_id=admin_user.id,
                new_role=GroupRole.MEMBER,
                updated_by=member_user
            )

    def test_update_member_role_invalid_role(self, group_with_members, group_creator, member_user):
        with pytest.raises(ValidationError):
            update_member_role(
                group_id=group_with_members.id,
                user_id=member_user.id,
                new_role='owner',
                updated_by=group_creator
            )

    def test_update_member_role_not_member(self, group, group_creator, group_other_user):
        with pytest.raises(MemberNotFoundError):
            update_member_role(
                group_id=group.id,
                user_id=group_other_user.id,
                new_role=GroupRole.ADMIN,
                updated_by=group_creator
            )

    def test_creator_membership_is_always_admin(self, group, group_creator):
        """Saving the creator's membership forces the admin role."""
        membership = GroupMembership.objects.get(group=group, user=group_creator)
        membership.role = GroupRole.MEMBER
        membership.save()

        membership.refresh_from_db()
        assert membership.role == GroupRole.ADMIN
