"""
Budget management service.

CRUD for a user's monthly category budgets. ``spent_this_period`` is
never written here; only the budget tracker moves it.
"""

from decimal import Decimal
from typing import Optional
from uuid import UUID

import structlog
from django.conf import settings
from django.db import transaction, IntegrityError
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.budgets.models import Budget
from apps.common.exceptions import ValidationError
from apps.common.money import ZERO, to_money, validate_period
from apps.expenses.models import Category

from .exceptions import BudgetNotFoundError, DuplicateBudgetError

logger = structlog.get_logger(__name__)


def _validate_limit(limit) -> Decimal:
    limit = to_money(limit)
    if limit < ZERO:
        raise ValidationError("Budget limit must not be negative")
    return limit


def _validate_threshold(threshold_pct) -> int:
    try:
        threshold_pct = int(threshold_pct)
    except (TypeError, ValueError):
        raise ValidationError("Alert threshold must be a whole number")
    if not 0 <= threshold_pct <= 100:
        raise ValidationError("Alert threshold must be between 0 and 100")
    return threshold_pct


def create_budget(
    *,
    user: User,
    category: str,
    period: str,
    limit,
    alerts_enabled: bool = True,
    alert_threshold_pct: Optional[int] = None,
) -> Budget:
    """
    Create a budget for one category and month.

    Spending that happened before the budget existed is not counted.

    Raises:
        ValidationError: On bad category, period, limit or threshold
        DuplicateBudgetError: If the (category, period) budget exists
    """
    if category not in Category.values:
        raise ValidationError(f"Invalid category: {category}")
    validate_period(period)
    limit = _validate_limit(limit)
    if alert_threshold_pct is None:
        alert_threshold_pct = settings.LEDGER_DEFAULT_ALERT_THRESHOLD
    alert_threshold_pct = _validate_threshold(alert_threshold_pct)

    try:
        with transaction.atomic():
            budget = Budget.objects.create(
                user=user,
                category=category,
                period=period,
                limit=limit,
                alerts_enabled=alerts_enabled,
                alert_threshold_pct=alert_threshold_pct,
            )
    except IntegrityError:
        raise DuplicateBudgetError("Budget already exists for this category and month")

    logger.info("budget_created", budget_id=str(budget.id), category=category, period=period)
    return budget


def get_budget(*, budget_id: UUID, user: User) -> Budget:
    """
    Raises:
        BudgetNotFoundError: If missing or not owned by user
    """
    try:
        return Budget.objects.get(id=budget_id, user=user)
    except Budget.DoesNotExist:
        raise BudgetNotFoundError("Budget not found")


def list_budgets(*, user: User, period: Optional[str] = None) -> QuerySet[Budget]:
    budgets = Budget.objects.filter(user=user)
    if period:
        budgets = budgets.filter(period=validate_period(period))
    return budgets.order_by('-period', 'category')


@transaction.atomic
def update_budget(
    *,
    budget_id: UUID,
    user: User,
    limit=None,
    alerts_enabled: Optional[bool] = None,
    alert_threshold_pct: Optional[int] = None,
) -> Budget:
    """
    Change the limit or alert settings of a budget.

    Raises:
        BudgetNotFoundError: If missing or not owned by user
        ValidationError: On bad limit or threshold
    """
    try:
        budget = Budget.objects.select_for_update().get(id=budget_id, user=user)
    except Budget.DoesNotExist:
        raise BudgetNotFoundError("Budget not found")

    update_fields = ['updated_at']

    if limit is not None:
        budget.limit = _validate_limit(limit)
        update_fields.append('limit')

    if alerts_enabled is not None:
        budget.alerts_enabled = alerts_enabled
        update_fields.append('alerts_enabled')

    if alert_threshold_pct is not None:
        budget.alert_threshold_pct = _validate_threshold(alert_threshold_pct)
        update_fields.append('alert_threshold_pct')

    budget.save(update_fields=update_fields)
    return budget


def delete_budget(*, budget_id: UUID, user: User) -> None:
    """
    Raises:
        BudgetNotFoundError: If missing or not owned by user
    """
    deleted, _ = Budget.objects.filter(id=budget_id, user=user).delete()
    if not deleted:
        raise BudgetNotFoundError("Budget not found")
    logger.info("budget_deleted", budget_id=str(budget_id))
