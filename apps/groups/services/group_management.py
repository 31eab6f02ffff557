"""
Group management service.

Handles group CRUD operations with proper transaction safety.
"""

import re
import secrets
import string
from typing import Optional
from uuid import UUID

import structlog
from django.conf import settings
from django.db import transaction, IntegrityError
from django.db.models import Prefetch, QuerySet

from apps.accounts.models import User
from apps.budgets.services.budget_tracker import BudgetDirection, apply_budget_delta
from apps.common.exceptions import ValidationError
from apps.common.money import period_for
from apps.expenses.models import Expense
from apps.groups.models import Group, GroupMembership, GroupRole
from apps.ledger.models import Settlement

from .exceptions import (
    GroupCodeExhaustedError,
    GroupCodeTakenError,
    GroupNotFoundError,
    InsufficientPermissionsError,
    InvalidGroupCodeError,
)

logger = structlog.get_logger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_PATTERN = re.compile(r'^[A-Z0-9]{6}$')


def generate_group_code(length: Optional[int] = None) -> str:
    """Return a random code of uppercase letters and digits."""
    length = length or settings.GROUP_CODE_LENGTH
    return ''.join(secrets.choice(CODE_ALPHABET) for _ in range(length))


def normalize_group_code(code: str) -> str:
    """
    Trim and upper-case a user-supplied group code.

    Raises:
        InvalidGroupCodeError: If the result is not 6 letters/digits
    """
    normalized = (code or '').strip().upper()
    if not CODE_PATTERN.match(normalized):
        raise InvalidGroupCodeError("Group code must be 6 letters or digits")
    return normalized


def _create_with_code(*, name: str, creator: User, code: str) -> Group:
    # Each attempt is its own savepoint so a collision leaves the outer
    # transaction usable.
    with transaction.atomic():
        group = Group.objects.create(name=name, creator=creator, code=code)
        GroupMembership.objects.create(
            user=creator,
            group=group,
            role=GroupRole.ADMIN,
        )
    return group


def create_group(
    *,
    name: str,
    creator: User,
    code: Optional[str] = None,
    max_attempts: Optional[int] = None,
) -> Group:
    """
    Create a new group and add the creator as admin.

    Args:
        name: Group name
        creator: User who creates (and permanently administers) the group
        code: Optional custom join code; generated when omitted
        max_attempts: Attempts at generating a unique code
            (default ``GROUP_CODE_MAX_ATTEMPTS``)

    Returns:
        Created Group instance

    Raises:
        InvalidGroupCodeError: If a custom code is malformed
        GroupCodeTakenError: If a custom code is already in use
        GroupCodeExhaustedError: If no unique code could be generated
    """
    name = (name or '').strip()
    if not name:
        raise ValidationError("Group name is required")

    if code is not None:
        code = normalize_group_code(code)
        try:
            group = _create_with_code(name=name, creator=creator, code=code)
        except IntegrityError:
            raise GroupCodeTakenError("Group code already exists. Please choose a different code.")
        logger.info("group_created", group_id=str(group.id), code=group.code, custom_code=True)
        return group

    if max_attempts is None:
        max_attempts = settings.GROUP_CODE_MAX_ATTEMPTS
    for attempt in range(1, max_attempts + 1):
        candidate = generate_group_code()
        try:
            group = _create_with_code(name=name, creator=creator, code=candidate)
        except IntegrityError:
            logger.warning("group_code_collision", code=candidate, attempt=attempt)
            continue
        logger.info("group_created", group_id=str(group.id), code=group.code, attempts=attempt)
        return group

    logger.error("group_code_exhausted", attempts=max_attempts)
    raise GroupCodeExhaustedError("unable to generate unique code")


def get_group_by_id(*, group_id: UUID) -> Group:
    """
    Get a group by ID with its memberships prefetched.

    Raises:
        GroupNotFoundError: If group doesn't exist
    """
    try:
        return (
            Group.objects
            .select_related('creator')
            .prefetch_related(
                Prefetch(
                    'memberships',
                    queryset=GroupMembership.objects.select_related('user')
                )
            )
            .get(id=group_id)
        )
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")


def list_user_groups(*, user: User) -> QuerySet[Group]:
    """Groups where ``user`` is a member, newest first."""
    return (
        Group.objects
        .filter(memberships__user=user)
        .select_related('creator')
        .prefetch_related('memberships')
        .distinct()
    )


@transaction.atomic
def update_group(*, group_id: UUID, user: User, name: Optional[str] = None) -> Group:
    """
    Rename a group (admin only).

    Raises:
        GroupNotFoundError: If group doesn't exist
        InsufficientPermissionsError: If user is not admin
    """
    try:
        group = Group.objects.select_for_update().get(id=group_id)
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    if not group.is_admin(user):
        raise InsufficientPermissionsError("Only group admins can update the group")

    if name is not None and name.strip():
        group.name = name.strip()
        group.save(update_fields=['name', 'updated_at'])

    return group


@transaction.atomic
def delete_group(*, group_id: UUID, user: User) -> None:
    """
    Delete a group and everything that references it (creator only).

    The cascade runs in one transaction and in a fixed order:

    1. reverse the budget counters credited by the group's expenses
    2. delete the group's expenses (shares go with them)
    3. delete the group's settlements
    4. delete the group (memberships go with it)

    Every step filters by group, so re-running after a partial failure
    only finds what is left.

    Raises:
        GroupNotFoundError: If group doesn't exist
        InsufficientPermissionsError: If user is not the creator
    """
    try:
        group = Group.objects.select_for_update().get(id=group_id)
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    if group.creator_id != user.id:
        raise InsufficientPermissionsError("Only the group creator can delete the group")

    expenses = Expense.objects.filter(group_id=group.id)

    totals = {}
    for expense in expenses.select_related('paid_by').only('paid_by', 'category', 'amount', 'created_at'):
        key = (expense.paid_by, expense.category, period_for(expense.created_at))
        totals[key] = totals.get(key, 0) + expense.amount

    for (payer, category, period), amount in totals.items():
        apply_budget_delta(
            user=payer,
            category=category,
            period=period,
            amount=amount,
            direction=BudgetDirection.DEBIT,
        )

    expense_count, _ = expenses.delete()
    settlement_count, _ = Settlement.objects.filter(group_id=group.id).delete()
    group.delete()

    logger.info(
        "group_deleted",
        group_id=str(group_id),
        deleted_rows=expense_count + settlement_count,
        reversed_budget_keys=len(totals),
    )
