"""User registration service."""

import structlog
from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction

from .exceptions import EmailAlreadyRegisteredError, UserRegistrationError

User = get_user_model()
logger = structlog.get_logger(__name__)


@transaction.atomic
def register_user(
    *,
    email: str,
    password: str,
    display_name: str = ""
) -> User:
    """
    Register a new user.

    Args:
        email: User's email address (stored lower-cased)
        password: User's password (will be hashed)
        display_name: Optional display name

    Returns:
        Created User instance

    Raises:
        EmailAlreadyRegisteredError: If the email is already in use
        UserRegistrationError: If the email is missing
    """
    email = (email or '').strip().lower()
    if not email:
        raise UserRegistrationError("Email is required")

    if User.objects.filter(email=email).exists():
        raise EmailAlreadyRegisteredError("An account with this email already exists")

    try:
        with transaction.atomic():
            user = User.objects.create_user(
                email=email,
                password=password,
                display_name=display_name.strip(),
            )
    except IntegrityError:
        raise EmailAlreadyRegisteredError("An account with this email already exists")

    logger.info("user_registered", user_id=str(user.id))
    return user
