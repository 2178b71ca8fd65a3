# awards/models.py
from django.conf import settings
from django.db import models
from django.utils import timezone


def current_year():
    return timezone.now().year


class Award(models.Model):
    """ An award category that organisations are nominated for and enter. """
    class Status(models.TextChoices):
        DRAFT = 'Draft', 'Draft'
        PENDING = 'Pending', 'Pending'
        APPROVED = 'Approved', 'Approved'
        REJECTED = 'Rejected', 'Rejected'

    award_name = models.CharField(max_length=200)
    category = models.CharField(max_length=200, blank=True)
    sector = models.CharField(max_length=100, blank=True, db_index=True)
    region = models.CharField(max_length=100, blank=True, db_index=True)
    year = models.PositiveIntegerField(default=current_year, db_index=True)
    description = models.TextField(blank=True)

    is_active = models.BooleanField(default=True, help_text="Inactive awards are hidden from the public flows.")
    entry_fee = models.DecimalField(
        max_digits=8, decimal_places=2,
        null=True, blank=True,
        help_text="Optional: leave empty to charge the default entry fee."
    )
    status = models.CharField(
        max_length=10,
        choices=Status.choices,
        default=Status.DRAFT,
        db_index=True
    )
    winner = models.CharField(max_length=200, blank=True, help_text="Display name of the announced winner.")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-year', 'award_name']

    def __str__(self):
        return f"{self.award_name} ({self.year})"

    @property
    def effective_entry_fee(self):
        if self.entry_fee:
            return self.entry_fee
        return settings.DEFAULT_ENTRY_FEE

    @property
    def is_pending_review(self):
        return self.status in (self.Status.DRAFT, self.Status.PENDING)
