from django.contrib import admin
from apps.budgets.models import Budget


@admin.register(Budget)
class BudgetAdmin(admin.ModelAdmin):
    """Admin interface for Budgets."""

    list_display = ['user', 'category', 'period', 'limit', 'spent_this_period', 'alerts_enabled']
    list_filter = ['category', 'period', 'alerts_enabled']
    search_fields = ['user__email']
    readonly_fields = ['spent_this_period', 'created_at', 'updated_at']
    ordering = ['-period', 'category']

    def get_queryset(self, request):
        """Optimize query."""
        return super().get_queryset(request).select_related('user')
