# core/models.py
from django.db import models


class ActivityLog(models.Model):
    """ Audit trail of notable events (payments, votes, status changes). """
    entity_type = models.CharField(max_length=50, db_index=True)
    entity_id = models.CharField(max_length=64, db_index=True)
    action = models.CharField(max_length=50)
    details = models.TextField(blank=True)
    performed_by = models.CharField(max_length=254, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']
        verbose_name = "Activity Log Entry"
        verbose_name_plural = "Activity Log"

    def __str__(self):
        return f"{self.entity_type}:{self.entity_id} {self.action}"

    @classmethod
    def record(cls, entity, action, details='', performed_by=''):
        return cls.objects.create(
            entity_type=entity._meta.model_name,
            entity_id=str(entity.pk),
            action=action,
            details=details,
            performed_by=performed_by or '',
        )
