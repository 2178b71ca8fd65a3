# entries/models.py
import secrets

from django.db import models
from django.utils import timezone


class Entry(models.Model):
    """ A submission by an organisation competing for an award. """
    class Status(models.TextChoices):
        DRAFT = 'draft', 'Draft'
        SUBMITTED = 'submitted', 'Submitted'
        UNDER_REVIEW = 'under_review', 'Under Review'
        SHORTLISTED = 'shortlisted', 'Shortlisted'
        WINNER = 'winner', 'Winner'
        REJECTED = 'rejected', 'Rejected'
        VOID = 'void', 'Void'  # Checkout could not be started

    class PaymentStatus(models.TextChoices):
        PENDING = 'pending', 'Pending'
        PAID = 'paid', 'Paid'
        FAILED = 'failed', 'Failed'
        REFUNDED = 'refunded', 'Refunded'

    # Only these statuses are ever shown to public voters.
    VOTABLE_STATUSES = (Status.SUBMITTED, Status.SHORTLISTED)

    entry_number = models.CharField(max_length=20, unique=True, editable=False)
    organisation = models.ForeignKey('organisations.Organisation', on_delete=models.PROTECT, related_name='entries')
    award = models.ForeignKey('awards.Award', on_delete=models.PROTECT, related_name='entries')

    entry_title = models.CharField(max_length=255)
    entry_description = models.TextField(blank=True)
    why_should_win = models.TextField()
    supporting_information = models.TextField(blank=True)
    videos = models.JSONField(default=list, blank=True, help_text="Links to supporting videos.")

    contact_name = models.CharField(max_length=150)
    contact_email = models.EmailField()
    contact_phone = models.CharField(max_length=50, blank=True)
    contact_position = models.CharField(max_length=150, blank=True)

    entry_fee = models.DecimalField(max_digits=8, decimal_places=2)
    status = models.CharField(max_length=15, choices=Status.choices, default=Status.DRAFT, db_index=True)
    payment_status = models.CharField(
        max_length=10,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
        db_index=True
    )
    payment_reference = models.CharField(
        max_length=255, blank=True, db_index=True,
        help_text="Checkout session id until paid, then the payment intent id."
    )
    submission_date = models.DateTimeField(null=True, blank=True)
    # Set by the submission wizard; a repeated confirm finds the same entry.
    submission_key = models.CharField(max_length=64, unique=True, null=True, blank=True, editable=False)

    is_public = models.BooleanField(default=False)
    allow_public_voting = models.BooleanField(default=False)
    public_votes = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']
        verbose_name_plural = "Entries"

    def __str__(self):
        return f"{self.entry_number} - {self.entry_title}"

    @staticmethod
    def generate_entry_number():
        year = timezone.now().year
        while True:
            candidate = f"BTA-{year}-{secrets.token_hex(3).upper()}"
            if not Entry.objects.filter(entry_number=candidate).exists():
                return candidate

    def save(self, *args, **kwargs):
        if not self.entry_number:
            self.entry_number = self.generate_entry_number()
        super().save(*args, **kwargs)

    @property
    def is_votable(self):
        return self.is_public and self.allow_public_voting and self.status in self.VOTABLE_STATUSES


class Invoice(models.Model):
    class Status(models.TextChoices):
        PAID = 'paid', 'Paid'
        REFUNDED = 'refunded', 'Refunded'

    organisation = models.ForeignKey(
        'organisations.Organisation', on_delete=models.SET_NULL,
        null=True, blank=True, related_name='invoices'
    )
    entry = models.ForeignKey(Entry, on_delete=models.SET_NULL, null=True, blank=True, related_name='invoices')
    invoice_type = models.CharField(max_length=30, default='entry_fee')
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PAID, db_index=True)
    total_amount = models.DecimalField(max_digits=10, decimal_places=2)
    currency = models.CharField(max_length=3, default='GBP')
    paid_date = models.DateTimeField(null=True, blank=True)
    payment_method = models.CharField(max_length=30, blank=True)
    payment_reference = models.CharField(max_length=255, blank=True, db_index=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"Invoice {self.pk} - {self.total_amount} {self.currency} ({self.get_status_display()})"
