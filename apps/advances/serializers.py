from rest_framework import serializers

from apps.accounts.serializers import UserSummarySerializer
from apps.budget_requests.models import BudgetRequest
from apps.invoices.models import Invoice
from .models import Advance, AdvanceStatus
from .services import DELETE_STRATEGIES


class AdvanceSerializer(serializers.ModelSerializer):
    user = UserSummarySerializer(read_only=True)
    company_name = serializers.CharField(source='company.name', read_only=True)
    created_by = UserSummarySerializer(read_only=True)
    transfer_confirmed_by = UserSummarySerializer(read_only=True)
    settled_by = UserSummarySerializer(read_only=True)

    class Meta:
        model = Advance
        fields = [
            'id',
            'user',
            'company',
            'company_name',
            'amount',
            'description',
            'status',
            'source_type',
            'source_id',
            'transfer_number',
            'transfer_date',
            'transfer_confirmed_by',
            'transfer_confirmed_at',
            'settled_by',
            'settled_at',
            'created_by',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class AdvanceCreateSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()
    company_id = serializers.UUIDField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    description = serializers.CharField()


class AdvanceTransferSerializer(serializers.Serializer):
    transfer_number = serializers.CharField(required=False, allow_blank=True)


class AdvanceDeleteSerializer(serializers.Serializer):
    password = serializers.CharField(write_only=True)
    strategy = serializers.ChoiceField(choices=DELETE_STRATEGIES)
    target_advance_id = serializers.UUIDField(required=False, allow_null=True)


class AdvanceListQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=AdvanceStatus.values, required=False)
    user_id = serializers.UUIDField(required=False)
    search = serializers.CharField(required=False, allow_blank=True, default='')
    limit = serializers.IntegerField(required=False, min_value=1, max_value=200, default=50)
    offset = serializers.IntegerField(required=False, min_value=0, default=0)


class SourceBudgetRequestSerializer(serializers.ModelSerializer):
    class Meta:
        model = BudgetRequest
        fields = ['id', 'requested_amount', 'justification', 'status', 'created_at']
        read_only_fields = fields


class AdvanceInvoiceSerializer(serializers.ModelSerializer):
    company_name = serializers.CharField(source='company.name', read_only=True)

    class Meta:
        model = Invoice
        fields = ['id', 'invoice_number', 'amount', 'status', 'company_name', 'created_at']
        read_only_fields = fields


class AdvanceDetailSerializer(serializers.Serializer):
    advance = AdvanceSerializer()
    budget_request = SourceBudgetRequestSerializer(allow_null=True)
    invoices = AdvanceInvoiceSerializer(many=True)
    previous_advance = AdvanceSerializer(allow_null=True)
