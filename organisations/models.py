# organisations/models.py
from django.core.validators import MaxValueValidator
from django.db import models


class Organisation(models.Model):
    """ A company that can be nominated for awards and submit entries. """
    class Status(models.TextChoices):
        ACTIVE = 'active', 'Active'
        INACTIVE = 'inactive', 'Inactive'

    company_name = models.CharField(max_length=200)
    contact_name = models.CharField(max_length=150, blank=True)
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=50, blank=True)
    website = models.URLField(max_length=500, blank=True)
    logo_url = models.URLField(max_length=1024, blank=True)
    description = models.TextField(blank=True)
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.ACTIVE, db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['company_name']

    def __str__(self):
        return self.company_name


class Assignment(models.Model):
    """ Links an organisation to an award it has been nominated for. """
    class Status(models.TextChoices):
        NOMINATED = 'nominated', 'Nominated'
        SHORTLISTED = 'shortlisted', 'Shortlisted'
        WINNER = 'winner', 'Winner'
        REJECTED = 'rejected', 'Rejected'

    award = models.ForeignKey('awards.Award', on_delete=models.CASCADE, related_name='assignments')
    organisation = models.ForeignKey(Organisation, on_delete=models.CASCADE, related_name='assignments')
    status = models.CharField(
        max_length=12,
        choices=Status.choices,
        default=Status.NOMINATED,
        db_index=True
    )
    judge_score = models.PositiveSmallIntegerField(
        null=True, blank=True,
        validators=[MaxValueValidator(10)],
        help_text="Optional: judges' score out of 10."
    )
    announcement_date = models.DateField(null=True, blank=True, help_text="Set when the organisation is marked as winner.")
    assigned_by = models.CharField(max_length=254, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['award', 'organisation__company_name']
        constraints = [
            models.UniqueConstraint(fields=['award', 'organisation'], name='unique_assignment_per_award'),
        ]

    def __str__(self):
        return f"{self.organisation} - {self.award} ({self.get_status_display()})"
