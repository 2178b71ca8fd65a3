# voting/admin.py
from django.contrib import admin
from .models import Vote


@admin.register(Vote)
class VoteAdmin(admin.ModelAdmin):
    list_display = ('voter_email', 'voter_name', 'entry', 'email_verified', 'voter_ip', 'created_at')
    list_filter = ('email_verified', 'entry__award')
    search_fields = ('voter_email', 'voter_name', 'entry__entry_number', 'entry__entry_title')
    readonly_fields = ('verification_token', 'verification_sent_at', 'verified_at', 'created_at')
