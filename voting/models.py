# voting/models.py
import secrets

from django.db import models


def generate_verification_token():
    return secrets.token_urlsafe(32)


class Vote(models.Model):
    """
    One public vote. The unique constraint on (entry, voter_email) is what
    stops a voter from voting twice for the same entry.
    """
    entry = models.ForeignKey('entries.Entry', on_delete=models.CASCADE, related_name='votes')
    voter_email = models.EmailField()
    voter_name = models.CharField(max_length=150, blank=True)
    voter_ip = models.CharField(max_length=64, default='unknown')
    vote_value = models.PositiveSmallIntegerField(default=1)

    email_verified = models.BooleanField(default=False)
    verification_token = models.CharField(
        max_length=64, unique=True, default=generate_verification_token, editable=False
    )
    verification_sent_at = models.DateTimeField(null=True, blank=True)
    verified_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']
        constraints = [
            models.UniqueConstraint(fields=['entry', 'voter_email'], name='unique_vote_per_entry_email'),
        ]

    def __str__(self):
        return f"{self.voter_email} -> {self.entry_id}"

    def save(self, *args, **kwargs):
        self.voter_email = (self.voter_email or '').strip().lower()
        super().save(*args, **kwargs)
