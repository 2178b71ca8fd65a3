# organisations/admin.py
from django.contrib import admin, messages
from .models import Assignment, Organisation
from . import services


@admin.action(description="Mark selected assignments as Shortlisted")
def mark_as_shortlisted(modeladmin, request, queryset):
    for assignment in queryset.select_related('award', 'organisation'):
        services.change_status(assignment, Assignment.Status.SHORTLISTED, performed_by=request.user.email)
    modeladmin.message_user(request, f"{queryset.count()} assignments shortlisted.", messages.SUCCESS)

@admin.action(description="Mark selected assignments as Winner")
def mark_as_winner(modeladmin, request, queryset):
    for assignment in queryset.select_related('award', 'organisation'):
        services.change_status(assignment, Assignment.Status.WINNER, performed_by=request.user.email)
    modeladmin.message_user(request, f"{queryset.count()} assignments marked as winner.", messages.SUCCESS)


class AssignmentInline(admin.TabularInline):
    model = Assignment
    extra = 0
    fields = ('award', 'status', 'judge_score', 'announcement_date')
    readonly_fields = ('announcement_date',)


@admin.register(Organisation)
class OrganisationAdmin(admin.ModelAdmin):
    list_display = ('company_name', 'contact_name', 'email', 'website', 'status')
    list_filter = ('status',)
    search_fields = ('company_name', 'contact_name', 'email')
    inlines = [AssignmentInline]


@admin.register(Assignment)
class AssignmentAdmin(admin.ModelAdmin):
    list_display = ('organisation', 'award', 'status', 'judge_score', 'announcement_date', 'assigned_by')
    list_filter = ('status', 'award__year', 'award')
    search_fields = ('organisation__company_name', 'award__award_name')
    readonly_fields = ('announcement_date', 'created_at', 'updated_at')
    actions = [mark_as_shortlisted, mark_as_winner]
