from django.contrib import admin
from .models import BudgetRequest


@admin.register(BudgetRequest)
class BudgetRequestAdmin(admin.ModelAdmin):
    list_display = ['user', 'company', 'requested_amount', 'status', 'created_at']
    list_filter = ['status', 'company']
    search_fields = ['user__email', 'justification', 'transfer_number']
    raw_id_fields = ['user', 'company', 'reviewed_by', 'transfer_confirmed_by', 'settled_by']
    readonly_fields = [
        'status',
        'current_balance_at_request',
        'reviewed_by',
        'reviewed_at',
        'transfer_confirmed_by',
        'transfer_confirmed_at',
        'settled_by',
        'settled_at',
        'created_at',
        'updated_at',
    ]
