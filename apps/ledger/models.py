import uuid

from django.conf import settings
from django.db import models

from apps.core.exceptions import InternalError


class TransactionType(models.TextChoices):
    TOP_UP = 'zasilenie', 'Top-up'
    ADVANCE_CREDIT = 'advance_credit', 'Advance credit'
    ADJUSTMENT = 'adjustment', 'Manual adjustment'
    INVOICE_DEDUCTION = 'invoice_deduction', 'Invoice deduction'
    INVOICE_REFUND = 'invoice_refund', 'Correction refund'
    INVOICE_DELETE_REFUND = 'invoice_delete_refund', 'Deleted invoice refund'


class LedgerTransaction(models.Model):
    """
    Append-only record of one change to a user's balance.

    ``sequence`` numbers the rows of one user in the order they were
    written; replaying them from zero reproduces ``User.balance``.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='ledger_transactions',
    )
    sequence = models.PositiveIntegerField(editable=False)

    amount = models.DecimalField(max_digits=12, decimal_places=2)
    balance_before = models.DecimalField(max_digits=12, decimal_places=2)
    balance_after = models.DecimalField(max_digits=12, decimal_places=2)
    transaction_type = models.CharField(max_length=30, choices=TransactionType.choices)

    # BudgetRequest / Advance / Invoice that caused the change
    reference_id = models.UUIDField(null=True, blank=True, db_index=True)
    notes = models.TextField(blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'ledger_transactions'
        ordering = ['user', 'sequence']
        constraints = [
            models.UniqueConstraint(
                fields=['user', 'sequence'],
                name='unique_ledger_sequence_per_user',
            ),
        ]
        indexes = [
            models.Index(fields=['user', '-created_at'], name='ledger_user_created_idx'),
            models.Index(fields=['transaction_type'], name='ledger_type_idx'),
        ]

    def __str__(self):
        return f"{self.user_id} {self.transaction_type} {self.amount}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise InternalError("Ledger transactions are append-only")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise InternalError("Ledger transactions are append-only")
