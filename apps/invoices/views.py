import mimetypes

from django.http import FileResponse
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, parser_classes
from rest_framework.parsers import MultiPartParser, FormParser, JSONParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.accounts.permissions import IsAccountant, IsAdmin

from .serializers import (
    InvoiceSerializer,
    InvoiceUploadSerializer,
    InvoiceUpdateSerializer,
    InvoiceReviewSerializer,
    InvoiceListQuerySerializer,
    InvoiceEditHistorySerializer,
    AdminPasswordSerializer,
    DeletionRequestSerializer,
    DeletionRequestCreateSerializer,
    DeletionRequestReviewSerializer,
    DeletionRequestListQuerySerializer,
)
from .services import (
    upload_invoice,
    claim_for_review,
    review_heartbeat,
    release_review,
    finalize_review,
    mark_transferred,
    update_invoice_data,
    delete_invoice,
    create_deletion_request,
    review_deletion_request,
    cancel_deletion_request,
    list_deletion_requests,
    list_own_deletion_requests,
    list_own_invoices,
    list_invoices,
    get_invoice_detail,
    get_invoice_edit_history,
)
from .storage import open_blob


# =============================================================================
# INVOICES
# =============================================================================

@extend_schema(
    parameters=[OpenApiParameter('status', str, description='Filter by status')],
    request={'multipart/form-data': InvoiceUploadSerializer},
    responses={200: InvoiceSerializer(many=True), 201: InvoiceSerializer},
    description="GET: own invoices. POST: upload a scan and submit the invoice.",
    tags=['invoices'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@parser_classes([MultiPartParser, FormParser, JSONParser])
def invoice_list_create(request):
    if request.method == 'GET':
        invoices = list_own_invoices(
            user=request.user,
            status=request.query_params.get('status') or None,
        )
        return Response(InvoiceSerializer(invoices, many=True).data)

    serializer = InvoiceUploadSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    fields = dict(serializer.validated_data)
    image = fields.pop('image')
    invoice = upload_invoice(user=request.user, image=image, **fields)
    return Response({
        'success': True,
        'message': 'Invoice submitted',
        'invoice': InvoiceSerializer(invoice).data,
    }, status=status.HTTP_201_CREATED)


@extend_schema(
    parameters=[InvoiceListQuerySerializer],
    responses={200: InvoiceSerializer(many=True)},
    description="Every invoice, filtered for reviewers.",
    tags=['invoices'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAccountant])
def invoice_review_list(request):
    query = InvoiceListQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)

    limit = query.validated_data['limit']
    offset = query.validated_data['offset']
    invoices = list_invoices(**query.validated_data)
    return Response({
        'results': InvoiceSerializer(invoices, many=True).data,
        'next_offset': offset + limit if len(invoices) == limit else None,
    })


class InvoiceDetailView(APIView):
    """
    GET: invoice detail for the owner or a reviewer.
    PATCH: correct descriptive data (accountant).
    DELETE: direct deletion with refund (admin, password required).
    """

    def get_permissions(self):
        """Set permissions based on method."""
        if self.request.method == 'PATCH':
            return [IsAuthenticated(), IsAccountant()]
        if self.request.method == 'DELETE':
            return [IsAuthenticated(), IsAdmin()]
        return [IsAuthenticated()]

    @extend_schema(responses={200: InvoiceSerializer}, tags=['invoices'])
    def get(self, request, pk):
        invoice = get_invoice_detail(invoice_id=pk, viewer=request.user)
        return Response(InvoiceSerializer(invoice).data)

    @extend_schema(request=InvoiceUpdateSerializer, responses={200: InvoiceSerializer}, tags=['invoices'])
    def patch(self, request, pk):
        serializer = InvoiceUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        invoice = update_invoice_data(invoice_id=pk, editor=request.user, **serializer.validated_data)
        return Response({
            'success': True,
            'message': 'Invoice updated',
            'invoice': InvoiceSerializer(invoice).data,
        })

    @extend_schema(request=AdminPasswordSerializer, tags=['invoices'])
    def delete(self, request, pk):
        serializer = AdminPasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        delete_invoice(
            invoice_id=pk,
            admin=request.user,
            admin_password=serializer.validated_data['admin_password'],
        )
        return Response({'success': True, 'message': 'Invoice deleted'})


@extend_schema(description="Stream the invoice scan.", tags=['invoices'])
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def invoice_image(request, pk):
    invoice = get_invoice_detail(invoice_id=pk, viewer=request.user)
    content_type = mimetypes.guess_type(invoice.image_key)[0] or 'application/octet-stream'
    return FileResponse(open_blob(invoice.image_key), content_type=content_type)


@extend_schema(request=None, responses={200: InvoiceSerializer}, tags=['invoices'])
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAccountant])
def invoice_claim(request, pk):
    invoice = claim_for_review(invoice_id=pk, reviewer=request.user)
    return Response({
        'success': True,
        'message': 'Invoice claimed for review',
        'invoice': InvoiceSerializer(invoice).data,
    })


@extend_schema(
    request=None,
    responses={200: InvoiceSerializer},
    description="Keep the review claim alive; stale claims can be taken over.",
    tags=['invoices'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAccountant])
def invoice_heartbeat(request, pk):
    invoice = review_heartbeat(invoice_id=pk, reviewer=request.user)
    return Response({
        'success': True,
        'invoice': InvoiceSerializer(invoice).data,
    })


@extend_schema(responses={200: InvoiceEditHistorySerializer(many=True)}, tags=['invoices'])
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def invoice_history(request, pk):
    history = get_invoice_edit_history(invoice_id=pk, viewer=request.user)
    return Response({
        'success': True,
        'history': InvoiceEditHistorySerializer(history, many=True).data,
    })


@extend_schema(request=None, responses={200: InvoiceSerializer}, tags=['invoices'])
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAccountant])
def invoice_release(request, pk):
    invoice = release_review(invoice_id=pk, reviewer=request.user)
    return Response({
        'success': True,
        'message': 'Invoice released',
        'invoice': InvoiceSerializer(invoice).data,
    })


@extend_schema(request=InvoiceReviewSerializer, responses={200: InvoiceSerializer}, tags=['invoices'])
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAccountant])
def invoice_review(request, pk):
    serializer = InvoiceReviewSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    invoice = finalize_review(
        invoice_id=pk,
        reviewer=request.user,
        status=serializer.validated_data['status'],
        rejection_reason=serializer.validated_data.get('rejection_reason'),
    )
    return Response({
        'success': True,
        'message': f'Invoice {invoice.status}',
        'invoice': InvoiceSerializer(invoice).data,
    })


@extend_schema(request=None, responses={200: InvoiceSerializer}, tags=['invoices'])
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAccountant])
def invoice_mark_transferred(request, pk):
    invoice = mark_transferred(invoice_id=pk, actor=request.user)
    return Response({
        'success': True,
        'message': 'Invoice marked as transferred',
        'invoice': InvoiceSerializer(invoice).data,
    })


# =============================================================================
# DELETION REQUESTS
# =============================================================================

@extend_schema(
    request=DeletionRequestCreateSerializer,
    responses={201: DeletionRequestSerializer},
    tags=['invoice-deletion-requests'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def deletion_request_create(request, pk):
    serializer = DeletionRequestCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    deletion_request = create_deletion_request(
        invoice_id=pk,
        requester=request.user,
        reason=serializer.validated_data['reason'],
    )
    return Response({
        'success': True,
        'message': 'Deletion request submitted',
        'deletion_request': DeletionRequestSerializer(deletion_request).data,
    }, status=status.HTTP_201_CREATED)


@extend_schema(
    parameters=[DeletionRequestListQuerySerializer],
    responses={200: DeletionRequestSerializer(many=True)},
    tags=['invoice-deletion-requests'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdmin])
def deletion_request_list(request):
    query = DeletionRequestListQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)

    requests = list_deletion_requests(**query.validated_data)
    return Response(DeletionRequestSerializer(requests, many=True).data)


@extend_schema(responses={200: DeletionRequestSerializer(many=True)}, tags=['invoice-deletion-requests'])
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def deletion_request_mine(request):
    requests = list_own_deletion_requests(user=request.user)
    return Response(DeletionRequestSerializer(requests, many=True).data)


@extend_schema(
    request=DeletionRequestReviewSerializer,
    responses={200: DeletionRequestSerializer},
    description="Approve (refund and delete the invoice) or reject a pending deletion request.",
    tags=['invoice-deletion-requests'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdmin])
def deletion_request_review(request, pk):
    serializer = DeletionRequestReviewSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    deletion_request = review_deletion_request(
        request_id=pk,
        admin=request.user,
        action=serializer.validated_data['action'],
        admin_password=serializer.validated_data['admin_password'],
        rejection_reason=serializer.validated_data.get('rejection_reason'),
    )
    return Response({
        'success': True,
        'message': f'Deletion request {deletion_request.status}',
        'deletion_request': DeletionRequestSerializer(deletion_request).data,
    })


@extend_schema(request=None, tags=['invoice-deletion-requests'])
@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def deletion_request_cancel(request, pk):
    cancel_deletion_request(request_id=pk, requester=request.user)
    return Response({'success': True, 'message': 'Deletion request cancelled'})
