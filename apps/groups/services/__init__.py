"""
Groups app services layer.

Services contain business logic and orchestrate operations across models.
All state-changing operations use transactions and concurrency protection.
"""

from .exceptions import (
    GroupNotFoundError,
    InvalidGroupCodeError,
    GroupCodeTakenError,
    GroupCodeExhaustedError,
    AlreadyMemberError,
    NotMemberError,
    MemberNotFoundError,
    CreatorCannotLeaveError,
    CannotChangeCreatorRoleError,
    CannotRemoveCreatorError,
    InsufficientPermissionsError,
    UserNotFoundError,
)

from .group_management import (
    create_group,
    update_group,
    delete_group,
    get_group_by_id,
    list_user_groups,
    generate_group_code,
)

from .membership_management import (
    require_membership,
    join_group_by_code,
    leave_group,
    add_member,
    remove_member,
    get_group_members,
)

from .role_management import (
    update_member_role,
)


__all__ = [
    # Exceptions
    'GroupNotFoundError',
    'InvalidGroupCodeError',
    'GroupCodeTakenError',
    'GroupCodeExhaustedError',
    'AlreadyMemberError',
    'NotMemberError',
    'MemberNotFoundError',
    'CreatorCannotLeaveError',
    'CannotChangeCreatorRoleError',
    'CannotRemoveCreatorError',
    'InsufficientPermissionsError',
    'UserNotFoundError',

    # Group Management
    'create_group',
    'update_group',
    'delete_group',
    'get_group_by_id',
    'list_user_groups',
    'generate_group_code',

    # Membership Management
    'require_membership',
    'join_group_by_code',
    'leave_group',
    'add_member',
    'remove_member',
    'get_group_members',

    # Role Management
    'update_member_role',
]
