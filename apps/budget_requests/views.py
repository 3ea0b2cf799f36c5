from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import IsAccountant, IsAdmin

from .serializers import (
    BudgetRequestSerializer,
    BudgetRequestCreateSerializer,
    ReviewSerializer,
    ConfirmTransferSerializer,
    BudgetRequestListQuerySerializer,
    BulkDeleteSerializer,
    ApprovedAdvanceSerializer,
    RelatedInvoiceSerializer,
)
from .services import (
    create_budget_request,
    cancel_budget_request,
    review_budget_request,
    confirm_transfer,
    settle_budget_request,
    bulk_delete_budget_requests,
    list_own_requests,
    list_requests,
    get_visible_request,
    get_pending_count,
    get_related_invoices,
)


@extend_schema(
    request=BudgetRequestCreateSerializer,
    responses={200: BudgetRequestSerializer(many=True), 201: BudgetRequestSerializer},
    description="GET: own requests. POST: file a new request.",
    tags=['budget-requests'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def budget_request_list_create(request):
    if request.method == 'GET':
        requests = list_own_requests(user=request.user)
        return Response(BudgetRequestSerializer(requests, many=True).data)

    serializer = BudgetRequestCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    budget_request = create_budget_request(
        user=request.user,
        company_id=serializer.validated_data['company_id'],
        requested_amount=serializer.validated_data['requested_amount'],
        justification=serializer.validated_data['justification'],
    )
    return Response({
        'success': True,
        'request_id': budget_request.id,
        'message': 'Budget request submitted',
        'budget_request': BudgetRequestSerializer(budget_request).data,
    }, status=status.HTTP_201_CREATED)


@extend_schema(
    parameters=[BudgetRequestListQuerySerializer],
    responses={200: BudgetRequestSerializer(many=True)},
    description="All requests, filtered and sorted for reviewers.",
    tags=['budget-requests'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAccountant])
def budget_request_review_list(request):
    query = BudgetRequestListQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)

    items, next_offset = list_requests(**query.validated_data)
    return Response({
        'results': BudgetRequestSerializer(items, many=True).data,
        'next_offset': next_offset,
    })


@extend_schema(tags=['budget-requests'])
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAccountant])
def pending_count(request):
    return Response({'count': get_pending_count()})


@extend_schema(responses={200: BudgetRequestSerializer}, tags=['budget-requests'])
@api_view(['GET', 'DELETE'])
@permission_classes([IsAuthenticated])
def budget_request_detail(request, pk):
    """GET for reviewers or the owner. DELETE cancels one's own pending request."""
    if request.method == 'DELETE':
        cancel_budget_request(request_id=pk, user=request.user)
        return Response({'success': True, 'message': 'Budget request cancelled'})

    budget_request = get_visible_request(request_id=pk, viewer=request.user)
    return Response(BudgetRequestSerializer(budget_request).data)


@extend_schema(
    request=ReviewSerializer,
    responses={200: BudgetRequestSerializer},
    description="Approve (creates a pending advance) or reject a pending request.",
    tags=['budget-requests'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAccountant])
def review(request, pk):
    serializer = ReviewSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    budget_request, advance = review_budget_request(
        request_id=pk,
        reviewer=request.user,
        action=serializer.validated_data['action'],
        rejection_reason=serializer.validated_data.get('rejection_reason'),
    )
    payload = {
        'success': True,
        'message': f'Budget request {budget_request.status}',
        'budget_request': BudgetRequestSerializer(budget_request).data,
    }
    if advance is not None:
        payload['advance'] = ApprovedAdvanceSerializer(advance).data
    return Response(payload)


@extend_schema(
    request=ConfirmTransferSerializer,
    responses={200: BudgetRequestSerializer},
    tags=['budget-requests'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAccountant])
def transfer(request, pk):
    serializer = ConfirmTransferSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    budget_request = confirm_transfer(
        request_id=pk,
        confirmer=request.user,
        transfer_number=serializer.validated_data['transfer_number'],
    )
    return Response({
        'success': True,
        'message': 'Transfer confirmed',
        'budget_request': BudgetRequestSerializer(budget_request).data,
    })


@extend_schema(request=None, responses={200: BudgetRequestSerializer}, tags=['budget-requests'])
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAccountant])
def settle(request, pk):
    budget_request, invoice_ids = settle_budget_request(request_id=pk, settler=request.user)
    return Response({
        'success': True,
        'message': f'Budget request settled with {len(invoice_ids)} invoice(s)',
        'budget_request': BudgetRequestSerializer(budget_request).data,
        'linked_invoice_ids': invoice_ids,
    })


@extend_schema(responses={200: RelatedInvoiceSerializer(many=True)}, tags=['budget-requests'])
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAccountant])
def related_invoices(request, pk):
    invoices = get_related_invoices(request_id=pk)
    return Response(RelatedInvoiceSerializer(invoices, many=True).data)


@extend_schema(
    request=BulkDeleteSerializer,
    description="Hard-delete every request matching the filters.",
    tags=['budget-requests'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdmin])
def bulk_delete(request):
    serializer = BulkDeleteSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    filters = dict(serializer.validated_data)
    admin_password = filters.pop('admin_password')
    deleted = bulk_delete_budget_requests(
        admin=request.user,
        admin_password=admin_password,
        **filters,
    )
    return Response({
        'success': True,
        'message': f'{deleted} budget request(s) deleted',
        'deleted_count': deleted,
    })
