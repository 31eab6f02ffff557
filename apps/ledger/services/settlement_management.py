"""
Settlement management service.

A settlement records a payment made outside the app. It counts towards
group balances only once completed; completion is a conditional update
on ``status='pending'`` and never reverses.
"""

from uuid import UUID

import structlog
from django.db import transaction
from django.db.models import Q, QuerySet
from django.utils import timezone

from apps.accounts.models import User
from apps.common.money import ZERO, to_money
from apps.groups.services import require_membership
from apps.ledger.models import Settlement, SettlementStatus

from .exceptions import (
    InvalidSettlementError,
    NotSettlementPartyError,
    SettlementAlreadyCompletedError,
    SettlementNotFoundError,
)

logger = structlog.get_logger(__name__)


def _settlement_queryset() -> QuerySet[Settlement]:
    return Settlement.objects.select_related('from_user', 'to_user', 'group')


@transaction.atomic
def create_settlement(
    *,
    group_id: UUID,
    from_user: User,
    to_user_id: UUID,
    amount,
    description: str = '',
) -> Settlement:
    """
    Record a pending payment from ``from_user`` to another group member.

    Raises:
        GroupNotFoundError: If group doesn't exist
        NotMemberError: If from_user is not a member
        InvalidSettlementError: If the receiver is the sender or not a
            member, or the amount is negative
    """
    group = require_membership(group_id=group_id, user=from_user)

    amount = to_money(amount)
    if amount < ZERO:
        raise InvalidSettlementError("Settlement amount must not be negative")
    if str(to_user_id) == str(from_user.id):
        raise InvalidSettlementError("Cannot settle with yourself")
    if not group.memberships.filter(user_id=to_user_id).exists():
        raise InvalidSettlementError("Receiver is not a member of this group")

    settlement = Settlement.objects.create(
        group=group,
        from_user=from_user,
        to_user_id=to_user_id,
        amount=amount,
        description=(description or '').strip(),
    )
    logger.info(
        "settlement_created",
        settlement_id=str(settlement.id),
        group_id=str(group.id),
        amount=str(amount),
    )
    return _settlement_queryset().get(pk=settlement.pk)


@transaction.atomic
def complete_settlement(*, settlement_id: UUID, user: User) -> Settlement:
    """
    Mark a settlement completed (either party only).

    Raises:
        SettlementNotFoundError: If it doesn't exist
        NotSettlementPartyError: If user is neither sender nor receiver
        SettlementAlreadyCompletedError: If already completed
    """
    try:
        settlement = Settlement.objects.get(id=settlement_id)
    except Settlement.DoesNotExist:
        raise SettlementNotFoundError("Settlement not found")

    if not settlement.involves(user):
        raise NotSettlementPartyError("Not authorized to complete this settlement")

    updated = (
        Settlement.objects
        .filter(pk=settlement.pk, status=SettlementStatus.PENDING)
        .update(status=SettlementStatus.COMPLETED, completed_at=timezone.now(), updated_at=timezone.now())
    )
    if not updated:
        raise SettlementAlreadyCompletedError("Settlement is already completed")

    logger.info("settlement_completed", settlement_id=str(settlement.id), user_id=str(user.id))
    return _settlement_queryset().get(pk=settlement.pk)


def list_group_settlements(*, group_id: UUID, requester: User) -> QuerySet[Settlement]:
    """
    Raises:
        GroupNotFoundError: If group doesn't exist
        NotMemberError: If requester is not a member
    """
    require_membership(group_id=group_id, user=requester)
    return _settlement_queryset().filter(group_id=group_id).order_by('-created_at')


def list_user_settlements(*, user: User) -> QuerySet[Settlement]:
    """Settlements the user sent or received, newest first."""
    return (
        _settlement_queryset()
        .filter(Q(from_user=user) | Q(to_user=user))
        .order_by('-created_at')
    )
