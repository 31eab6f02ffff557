"""Notifications app services layer."""

from .exceptions import NotificationNotFoundError

from .emitter import (
    NotificationItem,
    emit_notification,
    emit_notifications,
    emit_notifications_safely,
    build_share_reminders,
)

from .inbox import (
    list_notifications,
    get_unread_count,
    mark_notification_read,
    mark_all_read,
)


__all__ = [
    # Exceptions
    'NotificationNotFoundError',

    # Emitter
    'NotificationItem',
    'emit_notification',
    'emit_notifications',
    'emit_notifications_safely',
    'build_share_reminders',

    # Inbox
    'list_notifications',
    'get_unread_count',
    'mark_notification_read',
    'mark_all_read',
]
