"""Per-user notification inbox."""

from typing import Optional
from uuid import UUID

from django.conf import settings
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.notifications.models import Notification

from .exceptions import NotificationNotFoundError


def list_notifications(*, user: User, limit: Optional[int] = None) -> QuerySet[Notification]:
    """Most recent notifications first, capped at ``limit``."""
    limit = limit or settings.NOTIFICATION_LIST_LIMIT
    return Notification.objects.filter(user=user).order_by('-created_at')[:limit]


def get_unread_count(*, user: User) -> int:
    return Notification.objects.filter(user=user, is_read=False).count()


def mark_notification_read(*, notification_id: UUID, user: User) -> Notification:
    """
    Mark one of the user's notifications as read.

    Marking an already-read notification again is a no-op.

    Raises:
        NotificationNotFoundError: If it doesn't exist or belongs to someone else
    """
    Notification.objects.filter(id=notification_id, user=user, is_read=False).update(is_read=True)
    try:
        return Notification.objects.get(id=notification_id, user=user)
    except Notification.DoesNotExist:
        raise NotificationNotFoundError("Notification not found")


def mark_all_read(*, user: User) -> int:
    """Mark every unread notification of ``user`` as read; returns the count."""
    return Notification.objects.filter(user=user, is_read=False).update(is_read=True)
