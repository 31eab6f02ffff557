"""Domain-specific exceptions for accounts services."""

from apps.common.exceptions import (
    AuthorizationError,
    ConflictError,
    ValidationError,
)


class UserRegistrationError(ValidationError):
    """Raised when user registration fails."""
    default_code = 'registration_failed'


class EmailAlreadyRegisteredError(ConflictError):
    """Raised when the email is already taken."""
    default_code = 'email_in_use'


class InvalidCredentialsError(AuthorizationError):
    """Raised when authentication credentials are invalid."""
    status_code = 401
    default_code = 'invalid_credentials'


class InactiveAccountError(AuthorizationError):
    """Raised when account is deactivated."""
    default_code = 'account_inactive'
