"""
Budgets app services layer.

``budget_tracker`` is internal: expense and group services call
``apply_budget_delta``; it is not exposed over HTTP.
"""

from .exceptions import BudgetNotFoundError, DuplicateBudgetError

from .budget_tracker import (
    BudgetDirection,
    BudgetDeltaResult,
    ThresholdCrossing,
    apply_budget_delta,
    detect_threshold_crossing,
    budget_status,
)

from .budget_management import (
    create_budget,
    get_budget,
    list_budgets,
    update_budget,
    delete_budget,
)

from .reports import (
    get_budget_vs_actual,
    get_budget_alerts,
    get_monthly_summary,
)


__all__ = [
    # Exceptions
    'BudgetNotFoundError',
    'DuplicateBudgetError',

    # Tracker
    'BudgetDirection',
    'BudgetDeltaResult',
    'ThresholdCrossing',
    'apply_budget_delta',
    'detect_threshold_crossing',
    'budget_status',

    # Management
    'create_budget',
    'get_budget',
    'list_budgets',
    'update_budget',
    'delete_budget',

    # Reports
    'get_budget_vs_actual',
    'get_budget_alerts',
    'get_monthly_summary',
]
