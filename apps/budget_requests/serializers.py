from rest_framework import serializers

from apps.accounts.serializers import UserSummarySerializer
from apps.advances.models import Advance
from apps.invoices.models import Invoice
from .models import BudgetRequest, BudgetRequestStatus


class BudgetRequestSerializer(serializers.ModelSerializer):
    """Budget request with its review trail."""
    user = UserSummarySerializer(read_only=True)
    company_name = serializers.CharField(source='company.name', read_only=True)
    reviewed_by = UserSummarySerializer(read_only=True)
    transfer_confirmed_by = UserSummarySerializer(read_only=True)
    settled_by = UserSummarySerializer(read_only=True)

    class Meta:
        model = BudgetRequest
        fields = [
            'id',
            'user',
            'company',
            'company_name',
            'requested_amount',
            'current_balance_at_request',
            'justification',
            'status',
            'rejection_reason',
            'reviewed_by',
            'reviewed_at',
            'transfer_number',
            'transfer_date',
            'transfer_confirmed_by',
            'transfer_confirmed_at',
            'settled_by',
            'settled_at',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class BudgetRequestCreateSerializer(serializers.Serializer):
    company_id = serializers.UUIDField()
    requested_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    justification = serializers.CharField()


class ReviewSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=['approve', 'reject'])
    rejection_reason = serializers.CharField(required=False, allow_blank=True)


class ConfirmTransferSerializer(serializers.Serializer):
    transfer_number = serializers.CharField()


class BudgetRequestListQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=BudgetRequestStatus.values + ['all'],
        required=False,
    )
    user_id = serializers.UUIDField(required=False)
    search = serializers.CharField(required=False, allow_blank=True, default='')
    sort_by = serializers.ChoiceField(
        choices=['created_at', 'requested_amount', 'status'],
        required=False,
        default='created_at',
    )
    sort_order = serializers.ChoiceField(choices=['asc', 'desc'], required=False, default='desc')
    limit = serializers.IntegerField(required=False, min_value=1, max_value=200, default=50)
    offset = serializers.IntegerField(required=False, min_value=0, default=0)


class BulkDeleteSerializer(serializers.Serializer):
    admin_password = serializers.CharField(write_only=True)
    statuses = serializers.ListField(
        child=serializers.ChoiceField(choices=BudgetRequestStatus.values + ['all']),
        required=False,
    )
    user_id = serializers.UUIDField(required=False)
    older_than_months = serializers.IntegerField(required=False, min_value=1)
    year = serializers.IntegerField(required=False, min_value=2000, max_value=2100)
    month = serializers.IntegerField(required=False, min_value=1, max_value=12)
    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)

    def validate(self, attrs):
        filter_keys = set(attrs) - {'admin_password'}
        if not filter_keys:
            raise serializers.ValidationError("At least one filter is required")
        if 'month' in attrs and 'year' not in attrs:
            raise serializers.ValidationError({'month': "Month filter requires a year"})
        return attrs


class ApprovedAdvanceSerializer(serializers.ModelSerializer):
    class Meta:
        model = Advance
        fields = ['id', 'amount', 'status', 'created_at']
        read_only_fields = fields


class RelatedInvoiceSerializer(serializers.ModelSerializer):
    class Meta:
        model = Invoice
        fields = ['id', 'invoice_number', 'amount', 'status', 'invoice_type', 'created_at']
        read_only_fields = fields
