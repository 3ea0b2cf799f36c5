import uuid

from django.conf import settings
from django.db import models
from django.db.models import Q


class BudgetRequestStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    APPROVED = 'approved', 'Approved'
    MONEY_TRANSFERRED = 'money_transferred', 'Money transferred'
    REJECTED = 'rejected', 'Rejected'
    SETTLED = 'settled', 'Settled'


class BudgetRequest(models.Model):
    """
    A user's request for more spendable money, reviewed by an accountant.

    pending -> approved | rejected
    approved -> money_transferred -> settled
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='budget_requests',
    )
    company = models.ForeignKey(
        'companies.Company',
        on_delete=models.PROTECT,
        related_name='budget_requests',
    )
    requested_amount = models.DecimalField(max_digits=12, decimal_places=2)
    current_balance_at_request = models.DecimalField(max_digits=12, decimal_places=2)
    justification = models.TextField()
    status = models.CharField(
        max_length=20,
        choices=BudgetRequestStatus.choices,
        default=BudgetRequestStatus.PENDING,
        db_index=True,
    )
    rejection_reason = models.TextField(blank=True)

    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
    )
    reviewed_at = models.DateTimeField(null=True, blank=True)

    transfer_number = models.CharField(max_length=255, blank=True)
    transfer_date = models.DateTimeField(null=True, blank=True)
    transfer_confirmed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
    )
    transfer_confirmed_at = models.DateTimeField(null=True, blank=True)

    settled_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
    )
    settled_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'budget_requests'
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['user', 'company'],
                condition=Q(status='pending'),
                name='unique_pending_budget_request',
            ),
        ]

    def __str__(self):
        return f"Budget request {self.requested_amount} by {self.user_id} ({self.status})"
