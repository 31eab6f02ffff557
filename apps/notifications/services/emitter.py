"""
Notification emitter.

Turns (user, message, kind) items into stored notifications. Two write
paths exist:

* ``emit_notifications`` raises ``PersistenceError`` when storage fails;
* ``emit_notifications_safely`` runs the same write in a savepoint, logs
  a failure and returns an empty list, so the caller's transaction (an
  expense or budget write) is never rolled back by a notification.
"""

from dataclasses import dataclass
from typing import Iterable, List
from uuid import UUID

import structlog
from django.conf import settings
from django.db import DatabaseError, transaction

from apps.common.exceptions import PersistenceError
from apps.common.money import ZERO, format_money
from apps.notifications.models import Notification, NotificationKind

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class NotificationItem:
    user_id: UUID
    message: str
    kind: str = NotificationKind.REMINDER


def emit_notification(*, user_id: UUID, message: str, kind: str = NotificationKind.REMINDER) -> Notification:
    """Store a single unread notification."""
    return emit_notifications([NotificationItem(user_id=user_id, message=message, kind=kind)])[0]


def emit_notifications(items: Iterable[NotificationItem]) -> List[Notification]:
    """
    Store a batch of unread notifications atomically.

    Raises:
        PersistenceError: If the batch could not be written
    """
    items = list(items)
    if not items:
        return []

    try:
        with transaction.atomic():
            created = Notification.objects.bulk_create([
                Notification(user_id=item.user_id, message=item.message, kind=item.kind)
                for item in items
            ])
    except DatabaseError as exc:
        raise PersistenceError("Failed to store notifications") from exc

    logger.info("notifications_emitted", count=len(created))
    return created


def emit_notifications_safely(items: Iterable[NotificationItem], *, context: str = '') -> List[Notification]:
    """Like ``emit_notifications`` but logs and swallows storage failures."""
    items = list(items)
    try:
        return emit_notifications(items)
    except PersistenceError:
        logger.exception("notification_emit_failed", context=context, count=len(items))
        return []


def build_share_reminders(*, expense) -> List[NotificationItem]:
    """
    One reminder per unpaid share of a group expense, skipping the payer
    and shares that rounded down to zero.
    """
    if not expense.is_group_expense:
        return []

    symbol = settings.LEDGER_CURRENCY_SYMBOL
    payer_name = expense.paid_by.get_display_name() if expense.paid_by_id else 'a group member'
    group_name = expense.group.name

    reminders = []
    for share in expense.shares.all():
        if share.user_id == expense.paid_by_id or share.amount <= ZERO:
            continue
        message = (
            f'You owe {symbol}{format_money(share.amount)} to {payer_name} '
            f'for "{expense.title}" in {group_name}.'
        )
        reminders.append(NotificationItem(user_id=share.user_id, message=message))
    return reminders
