"""
Budget reports.

"Actual" spending is the user's own part of each expense in the month:
the full amount of personal expenses they paid and their share amount of
group expenses.
"""

from decimal import Decimal
from typing import Dict, List, Tuple

from django.db.models import Sum

from apps.accounts.models import User
from apps.budgets.models import Budget, BudgetStatus
from apps.common.money import ZERO, period_bounds, to_money, validate_period
from apps.expenses.models import Expense, ExpenseShare

from .budget_tracker import budget_status

PCT = Decimal('0.01')


def _round_pct(value) -> Decimal:
    return Decimal(value).quantize(PCT)


def _percentage(actual, limit) -> Decimal:
    if not limit:
        return ZERO
    return _round_pct(Decimal(actual) * 100 / Decimal(limit))


def actual_spending(*, user: User, period: str) -> Tuple[Dict[str, Decimal], int]:
    """
    Return ``({category: amount}, expense_count)`` for the user's own
    spending in ``period``.
    """
    start, end = period_bounds(period)
    spending: Dict[str, Decimal] = {}

    personal = (
        Expense.objects
        .filter(paid_by=user, group__isnull=True, created_at__range=(start, end))
        .values('category')
        .annotate(total=Sum('amount'))
    )
    shares = (
        ExpenseShare.objects
        .filter(user=user, expense__group__isnull=False, expense__created_at__range=(start, end))
        .values('expense__category')
        .annotate(total=Sum('amount'))
    )

    for row in personal:
        spending[row['category']] = spending.get(row['category'], ZERO) + to_money(row['total'])
    for row in shares:
        category = row['expense__category']
        spending[category] = spending.get(category, ZERO) + to_money(row['total'])

    expense_count = (
        Expense.objects.filter(paid_by=user, group__isnull=True, created_at__range=(start, end)).count()
        + ExpenseShare.objects.filter(
            user=user, expense__group__isnull=False, expense__created_at__range=(start, end)
        ).count()
    )
    return spending, expense_count


def get_budget_vs_actual(*, user: User, period: str) -> List[dict]:
    """
    One row per budget of the month, plus a ``no-budget`` row for every
    category with spending but no budget.
    """
    validate_period(period)
    budgets = list(Budget.objects.filter(user=user, period=period).order_by('category'))
    spending, _ = actual_spending(user=user, period=period)

    rows = []
    for budget in budgets:
        actual = spending.get(budget.category, ZERO)
        percentage = _percentage(actual, budget.limit)
        rows.append({
            'category': budget.category,
            'budget': budget.limit,
            'actual': actual,
            'remaining': budget.limit - actual,
            'percentage': percentage,
            'status': budget_status(
                percentage=percentage if budget.limit else None,
                threshold_pct=budget.alert_threshold_pct,
            ),
            'alert': bool(budget.alerts_enabled and budget.limit and percentage >= budget.alert_threshold_pct),
        })

    budgeted = {budget.category for budget in budgets}
    for category in sorted(set(spending) - budgeted):
        actual = spending[category]
        rows.append({
            'category': category,
            'budget': ZERO,
            'actual': actual,
            'remaining': -actual,
            'percentage': ZERO,
            'status': BudgetStatus.NO_BUDGET,
            'alert': False,
        })

    return rows


def get_budget_alerts(*, user: User, period: str) -> List[dict]:
    """Budgets with alerts enabled whose spending is at or above threshold."""
    validate_period(period)
    spending, _ = actual_spending(user=user, period=period)

    alerts = []
    for budget in Budget.objects.filter(user=user, period=period, alerts_enabled=True).order_by('category'):
        if not budget.limit:
            continue
        actual = spending.get(budget.category, ZERO)
        percentage = _percentage(actual, budget.limit)
        if percentage < budget.alert_threshold_pct:
            continue
        alerts.append({
            'category': budget.category,
            'budget': budget.limit,
            'actual': actual,
            'percentage': percentage,
            'threshold': budget.alert_threshold_pct,
            'type': BudgetStatus.EXCEEDED if percentage >= 100 else BudgetStatus.WARNING,
        })
    return alerts


def get_monthly_summary(*, user: User, period: str) -> dict:
    validate_period(period)
    budgets = list(Budget.objects.filter(user=user, period=period).order_by('category'))
    spending, expense_count = actual_spending(user=user, period=period)

    total_budget = sum((budget.limit for budget in budgets), ZERO)
    total_spent = sum(spending.values(), ZERO)

    breakdown = []
    for budget in budgets:
        spent = spending.get(budget.category, ZERO)
        breakdown.append({
            'category': budget.category,
            'budget': budget.limit,
            'spent': spent,
            'remaining': budget.limit - spent,
            'percentage': _percentage(spent, budget.limit),
        })

    return {
        'period': period,
        'total_budget': total_budget,
        'total_spent': total_spent,
        'total_remaining': total_budget - total_spent,
        'category_breakdown': breakdown,
        'budget_count': len(budgets),
        'expense_count': expense_count,
    }
