from django.contrib import admin
from apps.notifications.models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ['user', 'kind', 'is_read', 'created_at']
    list_filter = ['kind', 'is_read', 'created_at']
    search_fields = ['user__email', 'message']
    readonly_fields = ['created_at']
    ordering = ['-created_at']

    def get_queryset(self, request):
        """Optimize query."""
        return super().get_queryset(request).select_related('user')
