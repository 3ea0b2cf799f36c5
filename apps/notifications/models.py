import uuid

from django.conf import settings
from django.db import models


class NotificationType(models.TextChoices):
    BUDGET_REQUEST_SUBMITTED = 'budget_request_submitted', 'Budget request submitted'
    BUDGET_REQUEST_APPROVED = 'budget_request_approved', 'Budget request approved'
    BUDGET_REQUEST_REJECTED = 'budget_request_rejected', 'Budget request rejected'
    BUDGET_REQUEST_TRANSFERRED = 'budget_request_transferred', 'Budget request transferred'
    BUDGET_REQUEST_SETTLED = 'budget_request_settled', 'Budget request settled'
    ADVANCE_TRANSFERRED = 'advance_transferred', 'Advance transferred'
    ADVANCE_SETTLED = 'advance_settled', 'Advance settled'
    BALANCE_ADJUSTED = 'balance_adjusted', 'Balance adjusted'
    INVOICE_REVIEWED = 'invoice_reviewed', 'Invoice reviewed'
    DELETION_REQUEST_SUBMITTED = 'deletion_request_submitted', 'Deletion request submitted'
    DELETION_REQUEST_REVIEWED = 'deletion_request_reviewed', 'Deletion request reviewed'


class Notification(models.Model):
    """In-app message for one user."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='notifications',
    )
    type = models.CharField(max_length=40, choices=NotificationType.choices)
    title = models.CharField(max_length=255)
    message = models.TextField()
    read = models.BooleanField(default=False)

    invoice_id = models.UUIDField(null=True, blank=True)
    company_id = models.UUIDField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'notifications'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'read'], name='notifications_user_read_idx'),
        ]

    def __str__(self):
        return f"{self.user_id}: {self.title}"
