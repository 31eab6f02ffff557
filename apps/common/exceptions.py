"""
Shared error taxonomy for the ledger services.

Every service-layer error derives from ``LedgerError``. The five direct
subclasses below are the only categories callers need to distinguish;
each app's ``services/exceptions.py`` narrows them further with domain
names (``GroupNotFoundError``, ``ShareAlreadyPaidError``, ...).

Exception Hierarchy:
    LedgerError (base)
    ├── ValidationError      malformed or out-of-range input
    ├── NotFoundError        referenced entity absent
    ├── ConflictError        uniqueness violation, already paid, already member
    ├── AuthorizationError   actor lacks the required role or membership
    └── PersistenceError     storage failure, fatal to the current operation

Each class carries the HTTP ``status_code`` and ``default_code`` used by
``apps.common.exception_handler`` so views never map errors by hand.

Usage:
    from apps.common.exceptions import ValidationError

    if amount <= 0:
        raise ValidationError("Amount must be greater than zero")
"""


class LedgerError(Exception):
    """Base exception for all ledger service errors."""

    status_code = 400
    default_code = 'ledger_error'
    default_message = 'Request could not be processed.'

    def __init__(self, message=None):
        super().__init__(message or self.default_message)

    @property
    def message(self):
        return str(self)


class ValidationError(LedgerError):
    """Raised when input is malformed or out of range."""

    status_code = 400
    default_code = 'validation_error'
    default_message = 'Invalid input.'


class NotFoundError(LedgerError):
    """Raised when a referenced entity does not exist."""

    status_code = 404
    default_code = 'not_found'
    default_message = 'Not found.'


class ConflictError(LedgerError):
    """Raised on uniqueness violations and repeated one-way transitions."""

    status_code = 409
    default_code = 'conflict'
    default_message = 'Conflicting state.'


class AuthorizationError(LedgerError):
    """Raised when the acting user lacks the required role or membership."""

    status_code = 403
    default_code = 'not_authorized'
    default_message = 'You do not have permission to perform this action.'


class PersistenceError(LedgerError):
    """Raised when the storage layer fails; the operation is aborted."""

    status_code = 503
    default_code = 'persistence_error'
    default_message = 'Storage is temporarily unavailable.'
