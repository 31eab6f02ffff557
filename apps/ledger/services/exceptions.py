"""Domain-specific exceptions for ledger app."""

from apps.common.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)


class ShareNotFoundError(NotFoundError):
    """Raised when the targeted share does not exist on the expense."""
    default_code = 'share_not_found'


class NotGroupExpenseError(NotFoundError):
    """Raised when a share is targeted on an expense without a group."""
    default_code = 'not_group_expense'


class ShareAlreadyPaidError(ConflictError):
    """Raised when a share is marked paid a second time."""
    default_code = 'share_already_paid'


class NotAllowedToMarkShareError(AuthorizationError):
    """Raised when the acting user may not settle the targeted share."""
    default_code = 'cannot_mark_share'


class SettlementNotFoundError(NotFoundError):
    """Raised when a settlement does not exist."""
    default_code = 'settlement_not_found'


class SettlementAlreadyCompletedError(ConflictError):
    """Raised when completing a settlement twice."""
    default_code = 'settlement_completed'


class NotSettlementPartyError(AuthorizationError):
    """Raised when someone outside a settlement tries to complete it."""
    default_code = 'not_settlement_party'


class InvalidSettlementError(ValidationError):
    """Raised when a settlement's parties or amount are invalid."""
    default_code = 'invalid_settlement'
