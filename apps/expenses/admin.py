from django.contrib import admin
from apps.expenses.models import Expense, ExpenseShare


class ExpenseShareInline(admin.TabularInline):
    """Inline admin for expense shares."""
    model = ExpenseShare
    extra = 0
    fields = ['position', 'user', 'amount', 'is_paid', 'paid_at']
    readonly_fields = ['position', 'user', 'amount', 'paid_at']


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    """Admin interface for Expenses."""

    list_display = ['title', 'amount', 'category', 'paid_by', 'group', 'created_at']
    list_filter = ['category', 'created_at']
    search_fields = ['title', 'paid_by__email', 'group__name']
    readonly_fields = ['amount', 'category', 'paid_by', 'group', 'created_at', 'updated_at']
    inlines = [ExpenseShareInline]
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    def get_queryset(self, request):
        """Optimize query."""
        return super().get_queryset(request).select_related('paid_by', 'group')
