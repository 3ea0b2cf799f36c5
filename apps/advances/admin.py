from django.contrib import admin
from .models import Advance


@admin.register(Advance)
class AdvanceAdmin(admin.ModelAdmin):
    list_display = ['user', 'company', 'amount', 'status', 'source_type', 'created_at']
    list_filter = ['status', 'source_type', 'company']
    search_fields = ['user__email', 'description', 'transfer_number']
    raw_id_fields = ['user', 'company', 'created_by', 'transfer_confirmed_by', 'settled_by']
    # Status changes go through the services so the ledger stays consistent
    readonly_fields = [
        'status',
        'amount',
        'source_type',
        'source_id',
        'transfer_confirmed_by',
        'transfer_confirmed_at',
        'settled_by',
        'settled_at',
        'created_at',
        'updated_at',
    ]
