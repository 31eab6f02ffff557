"""Services for accounts business logic."""

from .exceptions import (
    UserRegistrationError,
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    InactiveAccountError,
)
from .user_registration import register_user
from .user_authentication import authenticate_user

__all__ = [
    # Exceptions
    'UserRegistrationError',
    'EmailAlreadyRegisteredError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    # Services
    'register_user',
    'authenticate_user',
]
