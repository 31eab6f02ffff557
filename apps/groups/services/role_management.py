"""
Role management service.

Handles member role updates with concurrency protection.
"""

from uuid import UUID

from django.db import transaction

from apps.accounts.models import User
from apps.common.exceptions import ValidationError
from apps.groups.models import Group, GroupMembership, GroupRole

from .exceptions import (
    GroupNotFoundError,
    MemberNotFoundError,
    CannotChangeCreatorRoleError,
    InsufficientPermissionsError,
)


@transaction.atomic
def update_member_role(
    *,
    group_id: UUID,
    user_id: UUID,
    new_role: str,
    updated_by: User
) -> GroupMembership:
    """
    Update a member's role (admin only).

    Uses select_for_update to prevent concurrent role changes.
    The creator's role is fixed at admin.

    Raises:
        ValidationError: If new_role is not admin or member
        GroupNotFoundError: If group doesn't exist
        InsufficientPermissionsError: If updated_by is not admin
        CannotChangeCreatorRoleError: If the target is the creator
        MemberNotFoundError: If target user is not a member
    """
    if new_role not in GroupRole.values:
        raise ValidationError(f"Invalid role. Must be one of: {GroupRole.values}")

    try:
        group = Group.objects.get(id=group_id)
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    if not group.is_admin(updated_by):
        raise InsufficientPermissionsError("Only group admins can update member roles")

    if str(group.creator_id) == str(user_id):
        raise CannotChangeCreatorRoleError("Cannot change the creator's role")

    try:
        membership = (
            GroupMembership.objects
            .select_for_update()
            .get(group=group, user_id=user_id)
        )
    except GroupMembership.DoesNotExist:
        raise MemberNotFoundError("User is not a member of this group")

    membership.role = new_role
    membership.save(update_fields=['role'])

    return membership
