from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import IsAccountant

from .serializers import (
    AdvanceSerializer,
    AdvanceCreateSerializer,
    AdvanceTransferSerializer,
    AdvanceDeleteSerializer,
    AdvanceListQuerySerializer,
    AdvanceDetailSerializer,
)
from .services import (
    create_manual,
    transfer,
    settle,
    delete_advance,
    list_advances,
    get_advance_detail,
)


@extend_schema(
    parameters=[AdvanceListQuerySerializer],
    request=AdvanceCreateSerializer,
    responses={200: AdvanceSerializer(many=True), 201: AdvanceSerializer},
    description="GET: list advances. POST: create a manual advance.",
    tags=['advances'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAccountant])
def advance_list_create(request):
    if request.method == 'GET':
        query = AdvanceListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        items, next_offset = list_advances(**query.validated_data)
        return Response({
            'results': AdvanceSerializer(items, many=True).data,
            'next_offset': next_offset,
        })

    serializer = AdvanceCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    advance = create_manual(creator=request.user, **serializer.validated_data)
    return Response({
        'success': True,
        'message': 'Advance created',
        'advance': AdvanceSerializer(advance).data,
    }, status=status.HTTP_201_CREATED)


@extend_schema(
    request=AdvanceDeleteSerializer,
    responses={200: AdvanceDetailSerializer},
    description="GET: advance with its sources. DELETE: remove it (password required).",
    tags=['advances'],
)
@api_view(['GET', 'DELETE'])
@permission_classes([IsAuthenticated, IsAccountant])
def advance_detail(request, pk):
    if request.method == 'GET':
        return Response(AdvanceDetailSerializer(get_advance_detail(advance_id=pk)).data)

    serializer = AdvanceDeleteSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    summary = delete_advance(
        advance_id=pk,
        actor=request.user,
        password=serializer.validated_data['password'],
        strategy=serializer.validated_data['strategy'],
        target_advance_id=serializer.validated_data.get('target_advance_id'),
    )
    return Response({'success': True, 'message': 'Advance deleted', **summary})


@extend_schema(
    request=AdvanceTransferSerializer,
    responses={200: AdvanceSerializer},
    description="Mark the advance transferred and credit the user's balance.",
    tags=['advances'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAccountant])
def advance_transfer(request, pk):
    serializer = AdvanceTransferSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    advance = transfer(
        advance_id=pk,
        confirmer=request.user,
        transfer_number=serializer.validated_data.get('transfer_number'),
    )
    return Response({
        'success': True,
        'message': 'Advance transferred',
        'advance': AdvanceSerializer(advance).data,
    })


@extend_schema(request=None, responses={200: AdvanceSerializer}, tags=['advances'])
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAccountant])
def advance_settle(request, pk):
    advance, invoice_ids = settle(advance_id=pk, settler=request.user)
    return Response({
        'success': True,
        'message': f'Advance settled with {len(invoice_ids)} invoice(s)',
        'advance': AdvanceSerializer(advance).data,
        'linked_invoice_ids': invoice_ids,
    })
