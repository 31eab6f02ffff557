from django.contrib import admin
from apps.ledger.models import Settlement


@admin.register(Settlement)
class SettlementAdmin(admin.ModelAdmin):
    """Admin interface for Settlements."""

    list_display = ['group', 'from_user', 'to_user', 'amount', 'status', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['group__name', 'from_user__email', 'to_user__email']
    readonly_fields = ['status', 'completed_at', 'created_at', 'updated_at']
    ordering = ['-created_at']

    def get_queryset(self, request):
        """Optimize query."""
        return super().get_queryset(request).select_related('group', 'from_user', 'to_user')
