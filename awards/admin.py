# awards/admin.py
from django.contrib import admin, messages
from .models import Award


@admin.action(description="Mark selected awards as Approved")
def mark_as_approved(modeladmin, request, queryset):
    updated_count = queryset.update(status=Award.Status.APPROVED)
    modeladmin.message_user(request, f"{updated_count} awards have been approved.", messages.SUCCESS)

@admin.action(description="Mark selected awards as Rejected")
def mark_as_rejected(modeladmin, request, queryset):
    updated_count = queryset.update(status=Award.Status.REJECTED)
    modeladmin.message_user(request, f"{updated_count} awards have been rejected.", messages.SUCCESS)

@admin.action(description="Deactivate selected awards")
def mark_as_inactive(modeladmin, request, queryset):
    updated_count = queryset.update(is_active=False)
    modeladmin.message_user(request, f"{updated_count} awards have been deactivated.", messages.SUCCESS)


@admin.register(Award)
class AwardAdmin(admin.ModelAdmin):
    list_display = ('award_name', 'year', 'category', 'sector', 'region', 'status', 'is_active', 'entry_fee', 'winner')
    list_filter = ('year', 'status', 'is_active', 'sector', 'region')
    search_fields = ('award_name', 'category', 'winner')
    ordering = ('-year', 'award_name')
    readonly_fields = ('created_at', 'updated_at')
    fieldsets = (
        (None, {
            'fields': ('award_name', 'year', 'category', 'description')
        }),
        ('Classification', {
            'fields': (('sector', 'region'),)
        }),
        ('Status & Fees', {
            'fields': ('status', 'is_active', 'entry_fee', 'winner')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )
    actions = [mark_as_approved, mark_as_rejected, mark_as_inactive]
