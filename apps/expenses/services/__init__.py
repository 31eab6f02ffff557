"""
Expenses app services layer.

Services contain business logic and orchestrate operations across models.
All state-changing operations use transactions and concurrency protection.
"""

from .exceptions import (
    ExpenseNotFoundError,
    NotExpensePayerError,
)

from .share_allocation import (
    AllocatedShare,
    allocate_shares,
)

from .expense_management import (
    create_expense,
    get_expense,
    list_user_expenses,
    list_group_expenses,
    update_expense,
    delete_expense,
    write_expenses_csv,
)


__all__ = [
    # Exceptions
    'ExpenseNotFoundError',
    'NotExpensePayerError',

    # Share Allocation
    'AllocatedShare',
    'allocate_shares',

    # Expense Management
    'create_expense',
    'get_expense',
    'list_user_expenses',
    'list_group_expenses',
    'update_expense',
    'delete_expense',
    'write_expenses_csv',
]
