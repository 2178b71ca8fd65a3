# entries/admin.py
from django.contrib import admin, messages
from .models import Entry, Invoice


@admin.action(description="Open selected entries to public voting")
def enable_public_voting(modeladmin, request, queryset):
    updated_count = queryset.update(is_public=True, allow_public_voting=True)
    modeladmin.message_user(request, f"{updated_count} entries are now open to public voting.", messages.SUCCESS)

@admin.action(description="Close public voting for selected entries")
def disable_public_voting(modeladmin, request, queryset):
    updated_count = queryset.update(allow_public_voting=False)
    modeladmin.message_user(request, f"{updated_count} entries closed to public voting.", messages.SUCCESS)

@admin.action(description="Mark selected entries as Shortlisted")
def mark_as_shortlisted(modeladmin, request, queryset):
    updated_count = queryset.update(status=Entry.Status.SHORTLISTED)
    modeladmin.message_user(request, f"{updated_count} entries shortlisted.", messages.SUCCESS)


class InvoiceInline(admin.TabularInline):
    model = Invoice
    extra = 0
    fields = ('status', 'total_amount', 'currency', 'paid_date', 'payment_reference')
    readonly_fields = fields
    can_delete = False


@admin.register(Entry)
class EntryAdmin(admin.ModelAdmin):
    list_display = (
        'entry_number', 'entry_title', 'organisation', 'award',
        'status', 'payment_status', 'public_votes', 'submission_date',
    )
    list_filter = ('status', 'payment_status', 'allow_public_voting', 'award__year', 'award')
    search_fields = ('entry_number', 'entry_title', 'organisation__company_name', 'contact_email')
    readonly_fields = ('entry_number', 'payment_reference', 'public_votes', 'submission_date', 'created_at', 'updated_at')
    fieldsets = (
        (None, {
            'fields': ('entry_number', 'organisation', 'award', 'entry_title')
        }),
        ('Entry', {
            'fields': ('entry_description', 'why_should_win', 'supporting_information', 'videos')
        }),
        ('Contact', {
            'fields': (('contact_name', 'contact_position'), ('contact_email', 'contact_phone'))
        }),
        ('Status & Payment', {
            'fields': ('status', 'payment_status', 'entry_fee', 'payment_reference', 'submission_date')
        }),
        ('Public Voting', {
            'fields': (('is_public', 'allow_public_voting'), 'public_votes')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )
    inlines = [InvoiceInline]
    actions = [enable_public_voting, disable_public_voting, mark_as_shortlisted]


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = ('id', 'entry', 'organisation', 'status', 'total_amount', 'currency', 'paid_date')
    list_filter = ('status', 'currency')
    search_fields = ('payment_reference', 'entry__entry_number', 'organisation__company_name')
    readonly_fields = ('created_at',)
