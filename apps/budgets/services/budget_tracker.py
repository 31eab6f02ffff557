"""
Budget tracker.

Keeps ``Budget.spent_this_period`` in step with expense creation and
deletion and reports threshold crossings.

Counter updates happen under a row lock with a storage-side expression
(``F() + amount`` / ``Greatest(F() - amount, 0)``), so concurrent expenses
in the same (user, category, period) never lose an update.

Crossing rules, with ``prev`` and ``new`` the spend as a percentage of the
limit before and after a credit:

* warning  fires iff ``prev < threshold <= new < 100``
* exceeded fires iff ``prev < 100 <= new``

The two are disjoint, so a credit fires at most one of them. Debits never
fire anything.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Optional

import structlog
from django.conf import settings
from django.db import DatabaseError, transaction
from django.db.models import DecimalField, F, Value
from django.db.models.functions import Greatest

from apps.accounts.models import User
from apps.budgets.models import Budget, BudgetStatus
from apps.common.exceptions import PersistenceError, ValidationError
from apps.common.money import ZERO, format_money, to_money
from apps.notifications.models import NotificationKind
from apps.notifications.services import NotificationItem, emit_notifications_safely

logger = structlog.get_logger(__name__)

HUNDRED = Decimal('100')


class BudgetDirection(str, Enum):
    CREDIT = 'credit'
    DEBIT = 'debit'


@dataclass(frozen=True)
class ThresholdCrossing:
    kind: str
    percentage: Decimal
    remaining: Decimal = ZERO
    overage: Decimal = ZERO

    @property
    def notification_kind(self):
        if self.kind == BudgetStatus.EXCEEDED:
            return NotificationKind.ALERT
        return NotificationKind.REMINDER


@dataclass(frozen=True)
class BudgetDeltaResult:
    budget: Budget
    previous_spent: Decimal
    crossing: Optional[ThresholdCrossing] = None


def _percentage(spent, limit) -> Decimal:
    return Decimal(spent) * HUNDRED / Decimal(limit)


def detect_threshold_crossing(
    *,
    previous_spent,
    new_spent,
    limit,
    threshold_pct,
    alerts_enabled: bool = True,
) -> Optional[ThresholdCrossing]:
    """
    Return the crossing caused by moving from ``previous_spent`` to
    ``new_spent``, or None.

    A zero limit has no percentage and never alerts.
    """
    if not alerts_enabled or not limit:
        return None

    limit = Decimal(limit)
    threshold = Decimal(threshold_pct)
    prev_pct = _percentage(previous_spent, limit)
    new_pct = _percentage(new_spent, limit)

    if prev_pct < HUNDRED <= new_pct:
        return ThresholdCrossing(
            kind=BudgetStatus.EXCEEDED,
            percentage=new_pct,
            overage=max(ZERO, to_money(Decimal(new_spent) - limit)),
        )

    if prev_pct < threshold <= new_pct < HUNDRED:
        return ThresholdCrossing(
            kind=BudgetStatus.WARNING,
            percentage=new_pct,
            remaining=max(ZERO, to_money(limit - Decimal(new_spent))),
        )

    return None


def budget_status(*, percentage, threshold_pct) -> str:
    """Classify a spend percentage as normal, warning or exceeded."""
    if percentage is None:
        return BudgetStatus.NORMAL
    if percentage >= HUNDRED:
        return BudgetStatus.EXCEEDED
    if percentage >= Decimal(threshold_pct):
        return BudgetStatus.WARNING
    return BudgetStatus.NORMAL


def crossing_message(*, crossing: ThresholdCrossing, category: str, period: str) -> str:
    symbol = settings.LEDGER_CURRENCY_SYMBOL
    if crossing.kind == BudgetStatus.EXCEEDED:
        return (
            f"Alert! You've exceeded your {category} budget for {period} "
            f"by {symbol}{format_money(crossing.overage)}."
        )
    pct = crossing.percentage.quantize(Decimal('1'), rounding=ROUND_HALF_UP)
    return (
        f"Heads up! You've used {pct}% of your {category} budget for {period}. "
        f"Only {symbol}{format_money(crossing.remaining)} left."
    )


def apply_budget_delta(
    *,
    user: User,
    category: str,
    period: str,
    amount,
    direction: BudgetDirection,
) -> Optional[BudgetDeltaResult]:
    """
    Credit or debit the spend counter of the user's budget for
    (category, period).

    Budgets are opt-in: with no budget for the key this is a no-op and
    returns None. On credit, a threshold crossing emits one notification
    through the safe path; a failed notification is logged and does not
    undo the counter update.

    Raises:
        ValidationError: If amount is negative
        PersistenceError: If the counter could not be written
    """
    amount = to_money(amount)
    if amount < ZERO:
        raise ValidationError("Budget delta must not be negative")
    direction = BudgetDirection(direction)

    try:
        with transaction.atomic():
            budget = (
                Budget.objects
                .select_for_update()
                .filter(user=user, category=category, period=period)
                .first()
            )
            if budget is None:
                return None

            previous_spent = budget.spent_this_period
            if direction is BudgetDirection.CREDIT:
                new_value = F('spent_this_period') + amount
            else:
                new_value = Greatest(
                    F('spent_this_period') - amount,
                    Value(ZERO),
                    output_field=DecimalField(max_digits=12, decimal_places=2),
                )
            Budget.objects.filter(pk=budget.pk).update(spent_this_period=new_value)
            budget.refresh_from_db(fields=['spent_this_period', 'updated_at'])
    except DatabaseError as exc:
        logger.error(
            "budget_update_failed",
            user_id=str(user.id),
            category=category,
            period=period,
            direction=direction.value,
        )
        raise PersistenceError("Failed to update budget") from exc

    logger.info(
        "budget_delta_applied",
        budget_id=str(budget.id),
        direction=direction.value,
        amount=format_money(amount),
        spent=format_money(budget.spent_this_period),
    )

    if direction is not BudgetDirection.CREDIT:
        return BudgetDeltaResult(budget=budget, previous_spent=previous_spent)

    crossing = detect_threshold_crossing(
        previous_spent=previous_spent,
        new_spent=budget.spent_this_period,
        limit=budget.limit,
        threshold_pct=budget.alert_threshold_pct,
        alerts_enabled=budget.alerts_enabled,
    )
    if crossing is not None:
        logger.info(
            "budget_threshold_crossed",
            budget_id=str(budget.id),
            kind=str(crossing.kind),
            percentage=str(crossing.percentage.quantize(Decimal('0.01'))),
        )
        emit_notifications_safely(
            [NotificationItem(
                user_id=user.id,
                message=crossing_message(crossing=crossing, category=category, period=period),
                kind=crossing.notification_kind,
            )],
            context='budget_threshold',
        )

    return BudgetDeltaResult(budget=budget, previous_spent=previous_spent, crossing=crossing)
