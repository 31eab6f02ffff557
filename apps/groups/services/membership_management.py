"""
Membership management service.

Handles group membership operations with concurrency protection.
"""

from uuid import UUID

import structlog
from django.db import transaction, IntegrityError
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.groups.models import Group, GroupMembership, GroupRole

from .exceptions import (
    GroupNotFoundError,
    AlreadyMemberError,
    NotMemberError,
    MemberNotFoundError,
    CreatorCannotLeaveError,
    CannotRemoveCreatorError,
    InsufficientPermissionsError,
    InvalidGroupCodeError,
    UserNotFoundError,
)
from .group_management import normalize_group_code

logger = structlog.get_logger(__name__)


def require_membership(*, group_id: UUID, user: User) -> Group:
    """
    Return the group if ``user`` belongs to it.

    Raises:
        GroupNotFoundError: If group doesn't exist
        NotMemberError: If user is not a member
    """
    try:
        group = Group.objects.get(id=group_id)
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    if not group.has_member(user):
        raise NotMemberError("Not a member of this group")

    return group


@transaction.atomic
def join_group_by_code(*, code: str, user: User) -> GroupMembership:
    """
    Join a group using its 6-character code.

    Uses row-level locking to prevent race conditions when checking
    and creating memberships.

    Raises:
        GroupNotFoundError: If no group has this code
        AlreadyMemberError: If user is already a member
    """
    try:
        code = normalize_group_code(code)
    except InvalidGroupCodeError:
        raise GroupNotFoundError("Group not found. Please check the code and try again.")

    try:
        group = Group.objects.select_for_update().get(code=code)
    except Group.DoesNotExist:
        raise GroupNotFoundError("Group not found. Please check the code and try again.")

    if group.has_member(user):
        raise AlreadyMemberError("You are already a member of this group")

    try:
        with transaction.atomic():
            membership = GroupMembership.objects.create(
                user=user,
                group=group,
                role=GroupRole.MEMBER
            )
    except IntegrityError:
        raise AlreadyMemberError("You are already a member of this group")

    logger.info("group_joined", group_id=str(group.id), user_id=str(user.id))
    return membership


@transaction.atomic
def leave_group(*, group_id: UUID, user: User) -> None:
    """
    Leave a group. The creator can never leave.

    Raises:
        GroupNotFoundError: If group doesn't exist
        NotMemberError: If user is not a member
        CreatorCannotLeaveError: If user is the creator
    """
    try:
        group = Group.objects.get(id=group_id)
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    if group.creator_id == user.id:
        raise CreatorCannotLeaveError("Group creator cannot leave group")

    deleted, _ = GroupMembership.objects.filter(user=user, group=group).delete()
    if not deleted:
        raise NotMemberError("Not a member of this group")

    logger.info("group_left", group_id=str(group.id), user_id=str(user.id))


@transaction.atomic
def add_member(
    *,
    group_id: UUID,
    user_id: UUID,
    added_by: User,
    role: str = GroupRole.MEMBER
) -> GroupMembership:
    """
    Add a user to a group (admin only).

    Raises:
        GroupNotFoundError: If group doesn't exist
        InsufficientPermissionsError: If added_by is not admin
        UserNotFoundError: If the user doesn't exist
        AlreadyMemberError: If the user is already a member
    """
    try:
        group = Group.objects.select_for_update().get(id=group_id)
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    if not group.is_admin(added_by):
        raise InsufficientPermissionsError("Only admins can add members")

    try:
        user = User.objects.get(id=user_id)
    except User.DoesNotExist:
        raise UserNotFoundError(f"User with ID {user_id} not found")

    if group.has_member(user):
        raise AlreadyMemberError("User is already a member")

    try:
        with transaction.atomic():
            membership = GroupMembership.objects.create(user=user, group=group, role=role)
    except IntegrityError:
        raise AlreadyMemberError("User is already a member")

    logger.info("group_member_added", group_id=str(group.id), user_id=str(user.id), role=membership.role)
    return membership


@transaction.atomic
def remove_member(
    *,
    group_id: UUID,
    user_id: UUID,
    removed_by: User
) -> None:
    """
    Remove a member from a group (admin only).

    The creator cannot be removed. Expenses and settlements that reference
    the removed user stay in the group's history.

    Raises:
        GroupNotFoundError: If group doesn't exist
        InsufficientPermissionsError: If removed_by is not admin
        CannotRemoveCreatorError: If trying to remove the creator
        MemberNotFoundError: If target user is not a member
    """
    try:
        group = Group.objects.get(id=group_id)
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    if not group.is_admin(removed_by):
        raise InsufficientPermissionsError("Only admins can remove members")

    if str(group.creator_id) == str(user_id):
        raise CannotRemoveCreatorError("Cannot remove group creator")

    deleted, _ = GroupMembership.objects.filter(group=group, user_id=user_id).delete()
    if not deleted:
        raise MemberNotFoundError("User is not a member")

    logger.info("group_member_removed", group_id=str(group.id), user_id=str(user_id))


def get_group_members(*, group_id: UUID, requester: User) -> QuerySet[GroupMembership]:
    """
    Get all members of a group (members only).

    Raises:
        GroupNotFoundError: If group doesn't exist
        NotMemberError: If requester is not a member
    """
    require_membership(group_id=group_id, user=requester)

    return (
        GroupMembership.objects
        .filter(group_id=group_id)
        .select_related('user')
        .order_by('role', 'joined_at')
    )
