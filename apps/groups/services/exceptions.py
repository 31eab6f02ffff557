"""
Domain-specific exceptions for groups app.

Each narrows one of the shared categories in ``apps.common.exceptions``
so the API exception handler can map it to a status code.
"""

from apps.common.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)


class GroupNotFoundError(NotFoundError):
    """Raised when a group does not exist or is inaccessible."""
    default_code = 'group_not_found'


class InvalidGroupCodeError(ValidationError):
    """Raised when a group code is malformed."""
    default_code = 'invalid_group_code'


class GroupCodeTakenError(ConflictError):
    """Raised when a requested group code is already in use."""
    default_code = 'group_code_taken'


class GroupCodeExhaustedError(PersistenceError):
    """Raised when no unique group code could be generated."""
    default_code = 'group_code_exhausted'


class AlreadyMemberError(ConflictError):
    """Raised when a user tries to join a group they're already in."""
    default_code = 'already_member'


class NotMemberError(AuthorizationError):
    """Raised when a user tries to perform an action requiring membership."""
    default_code = 'not_member'


class MemberNotFoundError(NotFoundError):
    """Raised when the target user of a membership action is not in the group."""
    default_code = 'member_not_found'


class CreatorCannotLeaveError(ValidationError):
    """Raised when a group creator tries to leave their group."""
    default_code = 'creator_cannot_leave'


class CannotChangeCreatorRoleError(ValidationError):
    """Raised when attempting to change the creator's role."""
    default_code = 'creator_role_fixed'


class CannotRemoveCreatorError(ValidationError):
    """Raised when attempting to remove the group creator."""
    default_code = 'creator_cannot_be_removed'


class InsufficientPermissionsError(AuthorizationError):
    """Raised when a user lacks required permissions for an action."""
    default_code = 'insufficient_permissions'


class UserNotFoundError(NotFoundError):
    """Raised when the user to add does not exist."""
    default_code = 'user_not_found'
