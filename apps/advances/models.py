import uuid

from django.conf import settings
from django.db import models
from django.db.models import Q


class AdvanceStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    TRANSFERRED = 'transferred', 'Transferred'
    SETTLED = 'settled', 'Settled'


class AdvanceSource(models.TextChoices):
    MANUAL = 'manual', 'Manual'
    BUDGET_REQUEST = 'budget_request', 'Budget request'


class Advance(models.Model):
    """
    Money disbursed to a user.

    Lifecycle: pending -> transferred -> settled. The balance is credited on
    transfer, not on creation.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='advances',
    )
    company = models.ForeignKey(
        'companies.Company',
        on_delete=models.PROTECT,
        related_name='advances',
    )
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    description = models.TextField(blank=True)
    status = models.CharField(
        max_length=20,
        choices=AdvanceStatus.choices,
        default=AdvanceStatus.PENDING,
        db_index=True,
    )

    source_type = models.CharField(
        max_length=20,
        choices=AdvanceSource.choices,
        default=AdvanceSource.MANUAL,
    )
    # Budget request this advance was spawned from
    source_id = models.UUIDField(null=True, blank=True)

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

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'advances'
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['source_id'],
                condition=Q(source_type='budget_request'),
                name='unique_advance_per_budget_request',
            ),
        ]

    def __str__(self):
        return f"Advance {self.amount} for {self.user_id} ({self.status})"
