from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
import uuid

from apps.expenses.models import Category


class BudgetStatus(models.TextChoices):
    NORMAL = 'normal', 'Normal'
    WARNING = 'warning', 'Warning'
    EXCEEDED = 'exceeded', 'Exceeded'
    NO_BUDGET = 'no-budget', 'No budget'


class Budget(models.Model):
    """
    Monthly spending limit for one category.

    ``spent_this_period`` is only ever changed by the budget tracker.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='budgets')
    category = models.CharField(max_length=20, choices=Category.choices)
    period = models.CharField(max_length=7, help_text='YYYY-MM')
    limit = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    spent_this_period = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    alerts_enabled = models.BooleanField(default=True)
    alert_threshold_pct = models.PositiveSmallIntegerField(
        default=80,
        validators=[MinValueValidator(0), MaxValueValidator(100)]
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'budgets'
        constraints = [
            models.UniqueConstraint(
                fields=['user', 'category', 'period'],
                name='unique_budget_per_category_period'
            ),
        ]
        indexes = [
            models.Index(fields=['user', 'period'], name='budgets_user_id_8f1c2d_idx'),
        ]
        ordering = ['category']

    def __str__(self):
        return f"{self.user_id} {self.category} {self.period}: {self.spent_this_period}/{self.limit}"

    @property
    def percentage(self):
        """Spent as a percentage of the limit, or None when the limit is 0."""
        if not self.limit:
            return None
        return self.spent_this_period * 100 / self.limit

    @property
    def remaining(self):
        return max(Decimal('0.00'), self.limit - self.spent_this_period)
