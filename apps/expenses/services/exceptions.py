"""Domain-specific exceptions for expenses app."""

from apps.common.exceptions import AuthorizationError, NotFoundError


class ExpenseNotFoundError(NotFoundError):
    """Raised when an expense does not exist or is not visible to the user."""
    default_code = 'expense_not_found'


class NotExpensePayerError(AuthorizationError):
    """Raised when someone other than the payer changes an expense."""
    default_code = 'not_expense_payer'
