"""
Expense management service.

Creating an expense writes the expense, its shares and the payer's budget
credit in one transaction. Share reminders are emitted afterwards through
the notification safe path, so a failed reminder never undoes the expense.
"""

import csv
from datetime import datetime
from typing import Iterable, List, Optional
from uuid import UUID

import structlog
from django.db import DatabaseError, transaction
from django.db.models import Q, QuerySet
from django.utils import timezone

from apps.accounts.models import User
from apps.budgets.services.budget_tracker import BudgetDirection, apply_budget_delta
from apps.common.exceptions import PersistenceError, ValidationError
from apps.common.money import ZERO, format_money, period_for, to_money
from apps.expenses.models import Category, Expense, ExpenseShare
from apps.groups.models import Group
from apps.groups.services import GroupNotFoundError, NotMemberError, require_membership
from apps.notifications.services import build_share_reminders, emit_notifications_safely

from .exceptions import ExpenseNotFoundError, NotExpensePayerError
from .share_allocation import allocate_shares

logger = structlog.get_logger(__name__)

CSV_HEADER = ['Date', 'Title', 'Category', 'Amount', 'Group', 'PaidBy']


def _parse_member_ids(member_ids: Iterable) -> List[UUID]:
    parsed = []
    for member_id in member_ids:
        try:
            parsed.append(member_id if isinstance(member_id, UUID) else UUID(str(member_id)))
        except ValueError:
            raise ValidationError(f"Invalid member id: {member_id}")
    return parsed


def _expense_queryset() -> QuerySet[Expense]:
    return (
        Expense.objects
        .select_related('paid_by', 'group')
        .prefetch_related('shares__user')
    )


def create_expense(
    *,
    payer: User,
    title: str,
    amount,
    category: str,
    group_id: Optional[UUID] = None,
    obligated_member_ids: Optional[Iterable] = None,
    receipt_url: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> Expense:
    """
    Record a personal or group expense.

    For a group expense the amount is split equally across
    ``obligated_member_ids``; the payer's own share starts paid. The
    payer's budget for (category, month of ``created_at``) is credited
    with the full amount.

    Raises:
        ValidationError: On blank title, non-positive amount, unknown
            category, a group expense without members, members without a
            group, or members outside the group
        GroupNotFoundError: If the group doesn't exist
        NotMemberError: If the payer is not in the group
        PersistenceError: If the expense could not be stored
    """
    title = (title or '').strip()
    if not title:
        raise ValidationError("Title, amount, and category are required.")
    amount = to_money(amount)
    if amount <= ZERO:
        raise ValidationError("Amount must be greater than zero")
    if category not in Category.values:
        raise ValidationError(f"Invalid category: {category}")

    member_ids = _parse_member_ids(obligated_member_ids or [])
    group = None
    allocation = []

    if group_id is None:
        if member_ids:
            raise ValidationError("Members to split between require a group")
    else:
        try:
            group = Group.objects.get(id=group_id)
        except Group.DoesNotExist:
            raise GroupNotFoundError(f"Group with ID {group_id} not found")
        if not group.has_member(payer):
            raise NotMemberError("Not a member of this group")
        if not member_ids:
            raise ValidationError("Members to split between are required for group expenses")
        outsiders = set(member_ids) - group.member_ids()
        if outsiders:
            raise ValidationError("All members to split between must belong to the group")
        allocation = allocate_shares(amount=amount, member_ids=member_ids, payer_id=payer.id)

    created_at = created_at or timezone.now()

    try:
        with transaction.atomic():
            expense = Expense.objects.create(
                title=title,
                amount=amount,
                category=category,
                paid_by=payer,
                group=group,
                receipt_url=receipt_url or '',
                created_at=created_at,
            )
            ExpenseShare.objects.bulk_create([
                ExpenseShare(
                    expense=expense,
                    user_id=share.user_id,
                    position=position,
                    amount=share.amount,
                    is_paid=share.is_paid,
                    paid_at=created_at if share.is_paid else None,
                )
                for position, share in enumerate(allocation)
            ])
            apply_budget_delta(
                user=payer,
                category=category,
                period=period_for(created_at),
                amount=amount,
                direction=BudgetDirection.CREDIT,
            )
    except DatabaseError as exc:
        logger.error("expense_create_failed", payer_id=str(payer.id), group_id=str(group_id) if group_id else None)
        raise PersistenceError("Failed to save expense") from exc

    logger.info(
        "expense_created",
        expense_id=str(expense.id),
        payer_id=str(payer.id),
        group_id=str(group.id) if group else None,
        amount=format_money(amount),
        share_count=len(allocation),
    )

    expense = _expense_queryset().get(pk=expense.pk)
    if group is not None:
        emit_notifications_safely(build_share_reminders(expense=expense), context='share_reminder')
    return expense


def get_expense(*, expense_id: UUID, user: User) -> Expense:
    """
    Fetch an expense visible to ``user``: they paid it, hold a share of
    it, or belong to its group.

    Raises:
        ExpenseNotFoundError: If missing or not visible
    """
    try:
        expense = _expense_queryset().get(id=expense_id)
    except Expense.DoesNotExist:
        raise ExpenseNotFoundError("Expense not found")

    if expense.paid_by_id == user.id:
        return expense
    if any(share.user_id == user.id for share in expense.shares.all()):
        return expense
    if expense.group_id and expense.group.has_member(user):
        return expense
    raise ExpenseNotFoundError("Expense not found")


def list_user_expenses(
    *,
    user: User,
    category: Optional[str] = None,
    group_id: Optional[UUID] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> QuerySet[Expense]:
    """Expenses the user paid or holds a share of, newest first."""
    expenses = _expense_queryset().filter(Q(paid_by=user) | Q(shares__user=user))
    if category:
        expenses = expenses.filter(category=category)
    if group_id:
        expenses = expenses.filter(group_id=group_id)
    if start:
        expenses = expenses.filter(created_at__gte=start)
    if end:
        expenses = expenses.filter(created_at__lte=end)
    return expenses.distinct().order_by('-created_at')


def list_group_expenses(*, group_id: UUID, requester: User) -> QuerySet[Expense]:
    """
    Raises:
        GroupNotFoundError: If group doesn't exist
        NotMemberError: If requester is not a member
    """
    require_membership(group_id=group_id, user=requester)
    return _expense_queryset().filter(group_id=group_id).order_by('-created_at')


@transaction.atomic
def update_expense(
    *,
    expense_id: UUID,
    requester: User,
    title: Optional[str] = None,
    receipt_url: Optional[str] = None,
) -> Expense:
    """
    Change the title or receipt of an expense (payer only).

    Amount, category and members are fixed once shares and budget
    counters have been written.

    Raises:
        ExpenseNotFoundError: If missing
        NotExpensePayerError: If requester is not the payer
        ValidationError: If the new title is blank
    """
    try:
        expense = Expense.objects.select_for_update().get(id=expense_id)
    except Expense.DoesNotExist:
        raise ExpenseNotFoundError("Expense not found")

    if expense.paid_by_id != requester.id:
        raise NotExpensePayerError("Not authorized to update this expense")

    update_fields = ['updated_at']
    if title is not None:
        title = title.strip()
        if not title:
            raise ValidationError("Title cannot be blank")
        expense.title = title
        update_fields.append('title')
    if receipt_url is not None:
        expense.receipt_url = receipt_url
        update_fields.append('receipt_url')

    expense.save(update_fields=update_fields)
    return _expense_queryset().get(pk=expense.pk)


def delete_expense(*, expense_id: UUID, requester: User) -> None:
    """
    Delete an expense (payer only) and reverse its budget credit.

    No notification is emitted on deletion.

    Raises:
        ExpenseNotFoundError: If missing
        NotExpensePayerError: If requester is not the payer
        PersistenceError: If the deletion could not be stored
    """
    try:
        with transaction.atomic():
            try:
                expense = Expense.objects.select_for_update().get(id=expense_id)
            except Expense.DoesNotExist:
                raise ExpenseNotFoundError("Expense not found")

            if expense.paid_by_id != requester.id:
                raise NotExpensePayerError("Not authorized to delete this expense")

            apply_budget_delta(
                user=requester,
                category=expense.category,
                period=expense.period,
                amount=expense.amount,
                direction=BudgetDirection.DEBIT,
            )
            expense.delete()
    except DatabaseError as exc:
        raise PersistenceError("Failed to delete expense") from exc

    logger.info("expense_deleted", expense_id=str(expense_id), payer_id=str(requester.id))


def write_expenses_csv(*, expenses: Iterable[Expense], stream) -> int:
    """
    Write ``expenses`` as CSV rows to ``stream``; returns the row count.

    Columns: Date, Title, Category, Amount, Group, PaidBy.
    """
    writer = csv.writer(stream)
    writer.writerow(CSV_HEADER)
    count = 0
    for expense in expenses:
        writer.writerow([
            timezone.localtime(expense.created_at).date().isoformat(),
            expense.title,
            expense.category,
            format_money(expense.amount),
            expense.group.name if expense.group_id else 'Personal',
            expense.paid_by.get_display_name(),
        ])
        count += 1
    return count
