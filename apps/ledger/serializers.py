from rest_framework import serializers

from apps.accounts.models import User
from apps.accounts.serializers import UserSummarySerializer
from .models import LedgerTransaction


class LedgerTransactionSerializer(serializers.ModelSerializer):
    created_by = UserSummarySerializer(read_only=True)

    class Meta:
        model = LedgerTransaction
        fields = [
            'id',
            'amount',
            'balance_before',
            'balance_after',
            'transaction_type',
            'reference_id',
            'notes',
            'created_by',
            'created_at',
        ]
        read_only_fields = fields


class UserBalanceSerializer(serializers.ModelSerializer):

    class Meta:
        model = User
        fields = ['id', 'email', 'name', 'balance']
        read_only_fields = fields


class AdjustBalanceSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    notes = serializers.CharField()


class BalanceStatsSerializer(serializers.Serializer):
    user_count = serializers.IntegerField()
    total_balance = serializers.DecimalField(max_digits=14, decimal_places=2)
    average_balance = serializers.DecimalField(max_digits=14, decimal_places=2)
    positive_count = serializers.IntegerField()
    negative_count = serializers.IntegerField()
    zero_count = serializers.IntegerField()


class HistoryQuerySerializer(serializers.Serializer):
    user = serializers.UUIDField(required=False)
    limit = serializers.IntegerField(required=False, min_value=1, max_value=200, default=50)
    offset = serializers.IntegerField(required=False, min_value=0, default=0)
