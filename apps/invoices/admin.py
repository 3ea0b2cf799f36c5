from django.contrib import admin
from .models import Invoice, InvoiceEditHistory, InvoiceDeletionRequest


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = ['invoice_number', 'user', 'company', 'amount', 'invoice_type', 'status', 'created_at']
    list_filter = ['status', 'invoice_type', 'company']
    search_fields = ['invoice_number', 'ksef_number', 'user__email']
    raw_id_fields = [
        'user',
        'company',
        'original_invoice',
        'advance',
        'budget_request',
        'current_reviewer',
        'reviewed_by',
        'transferred_by',
        'settled_by',
    ]
    # Amounts drive the ledger; they only change through the services
    readonly_fields = ['amount', 'correction_amount', 'status', 'image_key', 'created_at', 'updated_at']


@admin.register(InvoiceEditHistory)
class InvoiceEditHistoryAdmin(admin.ModelAdmin):
    list_display = ['invoice', 'edited_by', 'edited_at']
    search_fields = ['invoice__invoice_number', 'edited_by__email']
    raw_id_fields = ['invoice', 'edited_by']

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(InvoiceDeletionRequest)
class InvoiceDeletionRequestAdmin(admin.ModelAdmin):
    list_display = ['invoice_number', 'requested_by', 'status', 'reviewed_by', 'created_at']
    list_filter = ['status']
    search_fields = ['invoice_number', 'requested_by__email', 'reason']
    raw_id_fields = ['invoice', 'requested_by', 'reviewed_by']
    readonly_fields = ['status', 'reviewed_by', 'reviewed_at', 'created_at', 'updated_at']
