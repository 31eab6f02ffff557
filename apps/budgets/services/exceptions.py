"""Domain-specific exceptions for budgets app."""

from apps.common.exceptions import ConflictError, NotFoundError


class BudgetNotFoundError(NotFoundError):
    """Raised when a budget does not exist or belongs to another user."""
    default_code = 'budget_not_found'


class DuplicateBudgetError(ConflictError):
    """Raised when a budget already exists for the category and month."""
    default_code = 'budget_exists'
