from django.contrib import admin
from .models import ActivityLog


@admin.register(ActivityLog)
class ActivityLogAdmin(admin.ModelAdmin):
    list_display = ('created_at', 'entity_type', 'entity_id', 'action', 'performed_by')
    list_filter = ('entity_type', 'action')
    search_fields = ('entity_id', 'details', 'performed_by')
    readonly_fields = ('entity_type', 'entity_id', 'action', 'details', 'performed_by', 'created_at')

    def has_add_permission(self, request):
        return False
