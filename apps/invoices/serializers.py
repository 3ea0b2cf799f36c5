from rest_framework import serializers

from apps.accounts.serializers import UserSummarySerializer
from .models import (
    Invoice,
    InvoiceStatus,
    InvoiceType,
    InvoiceEditHistory,
    InvoiceDeletionRequest,
    DeletionRequestStatus,
)


class InvoiceSerializer(serializers.ModelSerializer):
    """Invoice with its review trail. ``image_key`` stays internal."""
    user = UserSummarySerializer(read_only=True)
    company_name = serializers.CharField(source='company.name', read_only=True)
    current_reviewer = UserSummarySerializer(read_only=True)
    reviewed_by = UserSummarySerializer(read_only=True)

    class Meta:
        model = Invoice
        fields = [
            'id',
            'user',
            'company',
            'company_name',
            'invoice_number',
            'ksef_number',
            'amount',
            'status',
            'invoice_type',
            'original_invoice',
            'correction_amount',
            'advance',
            'budget_request',
            'description',
            'justification',
            'rejection_reason',
            'current_reviewer',
            'review_started_at',
            'last_review_ping',
            'reviewed_by',
            'reviewed_at',
            'transferred_at',
            'settled_at',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class InvoiceUploadSerializer(serializers.Serializer):
    image = serializers.FileField()
    company_id = serializers.UUIDField()
    invoice_number = serializers.CharField(max_length=255)
    justification = serializers.CharField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)
    ksef_number = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)
    invoice_type = serializers.ChoiceField(choices=InvoiceType.values, default=InvoiceType.EINVOICE)
    original_invoice_id = serializers.UUIDField(required=False, allow_null=True)
    correction_amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False, allow_null=True
    )
    advance_id = serializers.UUIDField(required=False, allow_null=True)
    budget_request_id = serializers.UUIDField(required=False, allow_null=True)
    description = serializers.CharField(required=False, allow_blank=True, default='')


class InvoiceUpdateSerializer(serializers.Serializer):
    invoice_number = serializers.CharField(max_length=255, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    ksef_number = serializers.CharField(max_length=255, required=False, allow_blank=True)


class InvoiceReviewSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[InvoiceStatus.ACCEPTED, InvoiceStatus.REJECTED])
    rejection_reason = serializers.CharField(required=False, allow_blank=True)


class InvoiceListQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=InvoiceStatus.values, required=False)
    company_id = serializers.UUIDField(required=False)
    user_id = serializers.UUIDField(required=False)
    search = serializers.CharField(required=False, allow_blank=True, default='')
    limit = serializers.IntegerField(required=False, min_value=1, max_value=200, default=50)
    offset = serializers.IntegerField(required=False, min_value=0, default=0)


class InvoiceEditHistorySerializer(serializers.ModelSerializer):
    edited_by = UserSummarySerializer(read_only=True)

    class Meta:
        model = InvoiceEditHistory
        fields = [
            'id',
            'edited_by',
            'previous_invoice_number',
            'new_invoice_number',
            'previous_description',
            'new_description',
            'previous_ksef_number',
            'new_ksef_number',
            'edited_at',
        ]
        read_only_fields = fields


class AdminPasswordSerializer(serializers.Serializer):
    admin_password = serializers.CharField(write_only=True)


class DeletionRequestSerializer(serializers.ModelSerializer):
    requested_by = UserSummarySerializer(read_only=True)
    reviewed_by = UserSummarySerializer(read_only=True)

    class Meta:
        model = InvoiceDeletionRequest
        fields = [
            'id',
            'invoice',
            'invoice_number',
            'requested_by',
            'reason',
            'status',
            'reviewed_by',
            'reviewed_at',
            'rejection_reason',
            'created_at',
        ]
        read_only_fields = fields


class DeletionRequestCreateSerializer(serializers.Serializer):
    reason = serializers.CharField()


class DeletionRequestReviewSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=['approve', 'reject'])
    admin_password = serializers.CharField(write_only=True)
    rejection_reason = serializers.CharField(required=False, allow_blank=True)


class DeletionRequestListQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=DeletionRequestStatus.values, required=False)
    limit = serializers.IntegerField(required=False, min_value=1, max_value=200, default=50)
    offset = serializers.IntegerField(required=False, min_value=0, default=0)
