import uuid

from django.conf import settings
from django.db import models
from django.db.models import Q


class InvoiceStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    IN_REVIEW = 'in_review', 'In review'
    ACCEPTED = 'accepted', 'Accepted'
    REJECTED = 'rejected', 'Rejected'
    TRANSFERRED = 'transferred', 'Transferred'
    SETTLED = 'settled', 'Settled'


class InvoiceType(models.TextChoices):
    EINVOICE = 'einvoice', 'E-invoice'
    PARAGON = 'paragon', 'Receipt'
    CORRECTION = 'correction', 'Correction'


class Invoice(models.Model):
    """
    Expense document submitted by a user.

    pending -> in_review -> accepted | rejected
    accepted -> transferred -> settled

    A settled invoice is only ever written by the settlement cascade.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='invoices',
    )
    company = models.ForeignKey(
        'companies.Company',
        on_delete=models.PROTECT,
        related_name='invoices',
    )
    invoice_number = models.CharField(max_length=255)
    ksef_number = models.CharField(max_length=255, null=True, blank=True)
    # Opaque key in the blob store
    image_key = models.CharField(max_length=500)
    amount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)

    status = models.CharField(
        max_length=20,
        choices=InvoiceStatus.choices,
        default=InvoiceStatus.PENDING,
        db_index=True,
    )
    invoice_type = models.CharField(
        max_length=20,
        choices=InvoiceType.choices,
        default=InvoiceType.EINVOICE,
    )
    original_invoice = models.ForeignKey(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='corrections',
    )
    correction_amount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)

    advance = models.ForeignKey(
        'advances.Advance',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='invoices',
    )
    budget_request = models.ForeignKey(
        'budget_requests.BudgetRequest',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='invoices',
    )

    description = models.TextField(blank=True)
    justification = models.TextField()
    rejection_reason = models.TextField(blank=True)

    current_reviewer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
    )
    review_started_at = models.DateTimeField(null=True, blank=True)
    last_review_ping = models.DateTimeField(null=True, blank=True)
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
    )
    reviewed_at = models.DateTimeField(null=True, blank=True)
    transferred_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
    )
    transferred_at = models.DateTimeField(null=True, blank=True)
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
        db_table = 'invoices'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', '-created_at'], name='invoices_user_created_idx'),
            models.Index(fields=['company', 'status'], name='invoices_company_status_idx'),
        ]

    def __str__(self):
        return f"Invoice {self.invoice_number} ({self.status})"


class DeletionRequestStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    APPROVED = 'approved', 'Approved'
    REJECTED = 'rejected', 'Rejected'


class InvoiceDeletionRequest(models.Model):
    """
    Request to hard-delete an invoice, confirmed by an admin.

    ``invoice`` becomes NULL once the deletion is approved; ``invoice_number``
    keeps the request readable afterwards.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    invoice = models.ForeignKey(
        Invoice,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='deletion_requests',
    )
    invoice_number = models.CharField(max_length=255)
    requested_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='invoice_deletion_requests',
    )
    reason = models.TextField()
    status = models.CharField(
        max_length=20,
        choices=DeletionRequestStatus.choices,
        default=DeletionRequestStatus.PENDING,
        db_index=True,
    )
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
    )
    reviewed_at = models.DateTimeField(null=True, blank=True)
    rejection_reason = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'invoice_deletion_requests'
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['invoice'],
                condition=Q(status='pending'),
                name='unique_pending_deletion_request',
            ),
        ]

    def __str__(self):
        return f"Deletion of {self.invoice_number} ({self.status})"


class InvoiceEditHistory(models.Model):
    """One accountant correction of an invoice's descriptive data."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    invoice = models.ForeignKey(
        Invoice,
        on_delete=models.CASCADE,
        related_name='edit_history',
    )
    edited_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name='+',
    )
    # Only the fields that changed are filled in
    previous_invoice_number = models.CharField(max_length=255, null=True, blank=True)
    new_invoice_number = models.CharField(max_length=255, null=True, blank=True)
    previous_description = models.TextField(null=True, blank=True)
    new_description = models.TextField(null=True, blank=True)
    previous_ksef_number = models.CharField(max_length=255, null=True, blank=True)
    new_ksef_number = models.CharField(max_length=255, null=True, blank=True)
    edited_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'invoice_edit_history'
        ordering = ['-edited_at']

    def __str__(self):
        return f"Edit of {self.invoice_id} at {self.edited_at}"
