# ==========================================
# apps/expenses/models.py
# ==========================================

from django.db import models
from django.utils import timezone
import uuid

from apps.common.money import period_for


class Category(models.TextChoices):
    FOOD = 'Food', 'Food'
    TRANSPORT = 'Transport', 'Transport'
    ENTERTAINMENT = 'Entertainment', 'Entertainment'
    SHOPPING = 'Shopping', 'Shopping'
    BILLS = 'Bills', 'Bills'
    HEALTHCARE = 'Healthcare', 'Healthcare'
    EDUCATION = 'Education', 'Education'
    OTHER = 'Other', 'Other'


class Expense(models.Model):
    """
    A single payment, personal or split across group members.

    Group expenses carry one ``ExpenseShare`` per obligated member; personal
    expenses have no shares and count fully against the payer.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=200)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    category = models.CharField(max_length=20, choices=Category.choices)
    paid_by = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='paid_expenses')
    group = models.ForeignKey(
        'groups.Group',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='expenses'
    )
    receipt_url = models.CharField(max_length=500, blank=True, default='')
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'expenses'
        indexes = [
            models.Index(fields=['paid_by', '-created_at'], name='expenses_paid_by_4a8e21_idx'),
            models.Index(fields=['group', '-created_at'], name='expenses_group_i_9b3c57_idx'),
            models.Index(fields=['category', '-created_at'], name='expenses_categor_1d6f80_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.title} ({self.amount})"

    @property
    def is_group_expense(self):
        return self.group_id is not None

    @property
    def period(self):
        """``YYYY-MM`` of ``created_at``; the budget key of this expense."""
        return period_for(self.created_at)

    @property
    def obligated_member_ids(self):
        return [share.user_id for share in self.shares.all()]

    @property
    def paid_member_ids(self):
        # Read-only projection of the shares' paid flags.
        return [share.user_id for share in self.shares.all() if share.is_paid]


class ExpenseShare(models.Model):
    """One obligated member's part of a group expense."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    expense = models.ForeignKey(Expense, on_delete=models.CASCADE, related_name='shares')
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='expense_shares')
    position = models.PositiveIntegerField()
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    is_paid = models.BooleanField(default=False)
    paid_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'expense_shares'
        constraints = [
            models.UniqueConstraint(fields=['expense', 'user'], name='unique_share_per_member'),
            models.UniqueConstraint(fields=['expense', 'position'], name='unique_share_position'),
        ]
        indexes = [
            models.Index(fields=['user', 'is_paid'], name='expense_sha_user_id_6e2a94_idx'),
        ]
        ordering = ['position']

    def __str__(self):
        state = 'paid' if self.is_paid else 'unpaid'
        return f"{self.user_id} owes {self.amount} on {self.expense_id} ({state})"
