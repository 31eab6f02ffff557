"""
Share payment.

Marking a share paid is one-way. The flip is a conditional update on
``is_paid=False``, so of two concurrent calls exactly one succeeds and
the other gets ``ShareAlreadyPaidError``.
"""

from typing import Optional
from uuid import UUID

import structlog
from django.db import transaction
from django.utils import timezone

from apps.accounts.models import User
from apps.common.exceptions import ValidationError
from apps.expenses.models import Expense, ExpenseShare
from apps.expenses.services import ExpenseNotFoundError

from .exceptions import (
    NotAllowedToMarkShareError,
    NotGroupExpenseError,
    ShareAlreadyPaidError,
    ShareNotFoundError,
)

logger = structlog.get_logger(__name__)


def _find_share(*, expense: Expense, acting_user: User, share_index, user_id) -> ExpenseShare:
    shares = expense.shares.all()
    if share_index is not None:
        try:
            position = int(share_index)
        except (TypeError, ValueError):
            raise ValidationError("Share index must be a whole number")
        share = shares.filter(position=position).first()
    else:
        share = shares.filter(user_id=user_id or acting_user.id).first()

    if share is None:
        raise ShareNotFoundError("User is not part of this expense split")
    return share


@transaction.atomic
def mark_share_paid(
    *,
    expense_id: UUID,
    acting_user: User,
    share_index: Optional[int] = None,
    user_id: Optional[UUID] = None,
) -> Expense:
    """
    Mark one share of a group expense as paid.

    The share is chosen by ``share_index`` when given, else by
    ``user_id``, else it is the acting user's own share. The acting user
    must be the share holder, the payer, or an admin of the group.

    Raises:
        ExpenseNotFoundError: If the expense doesn't exist
        NotGroupExpenseError: If the expense has no group
        ShareNotFoundError: If the targeted share doesn't exist
        NotAllowedToMarkShareError: If the acting user may not mark it
        ShareAlreadyPaidError: If the share is already paid
    """
    try:
        expense = Expense.objects.select_related('group').get(id=expense_id)
    except Expense.DoesNotExist:
        raise ExpenseNotFoundError("Expense not found")

    if not expense.is_group_expense:
        raise NotGroupExpenseError("This is not a group expense")

    share = _find_share(expense=expense, acting_user=acting_user, share_index=share_index, user_id=user_id)

    allowed = (
        acting_user.id in (share.user_id, expense.paid_by_id)
        or expense.group.is_admin(acting_user)
    )
    if not allowed:
        raise NotAllowedToMarkShareError("Not authorized to mark this share as paid")

    updated = (
        ExpenseShare.objects
        .filter(pk=share.pk, is_paid=False)
        .update(is_paid=True, paid_at=timezone.now())
    )
    if not updated:
        raise ShareAlreadyPaidError("Share is already marked as paid")

    logger.info(
        "share_marked_paid",
        expense_id=str(expense.id),
        share_user_id=str(share.user_id),
        position=share.position,
        acting_user_id=str(acting_user.id),
    )

    return (
        Expense.objects
        .select_related('paid_by', 'group')
        .prefetch_related('shares__user')
        .get(pk=expense.pk)
    )
