"""Domain-specific exceptions for notifications app."""

from apps.common.exceptions import NotFoundError


class NotificationNotFoundError(NotFoundError):
    """Raised when a notification does not exist or belongs to another user."""
    default_code = 'notification_not_found'
