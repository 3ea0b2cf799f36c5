from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import IsAccountant
from apps.core.money import expenses_setting

from .serializers import (
    LedgerTransactionSerializer,
    UserBalanceSerializer,
    AdjustBalanceSerializer,
    BalanceStatsSerializer,
    HistoryQuerySerializer,
)
from .services import (
    adjust_balance,
    get_balance,
    get_history,
    ensure_history_access,
    list_user_balances,
    get_balance_stats,
    replay_balance,
    verify_ledger,
)


@extend_schema(description="Balance of the current user.", tags=['ledger'])
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def my_balance(request):
    return Response({
        'balance': get_balance(user_id=request.user.id),
        'currency': expenses_setting('CURRENCY'),
    })


@extend_schema(
    parameters=[HistoryQuerySerializer],
    responses={200: LedgerTransactionSerializer(many=True)},
    description="Ledger history, newest first. Regular users only see their own.",
    tags=['ledger'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def history(request):
    query = HistoryQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)

    user_id = query.validated_data.get('user') or request.user.id
    ensure_history_access(viewer=request.user, user_id=user_id)

    limit = query.validated_data['limit']
    offset = query.validated_data['offset']
    entries = get_history(user_id=user_id, limit=limit, offset=offset)
    return Response({
        'results': LedgerTransactionSerializer(entries, many=True).data,
        'next_offset': offset + limit if len(entries) == limit else None,
    })


@extend_schema(responses={200: UserBalanceSerializer(many=True)}, tags=['ledger'])
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAccountant])
def user_balances(request):
    return Response(UserBalanceSerializer(list_user_balances(), many=True).data)


@extend_schema(tags=['ledger'])
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAccountant])
def user_balance_detail(request, user_id):
    return Response({
        'user_id': user_id,
        'balance': get_balance(user_id=user_id),
        'history': LedgerTransactionSerializer(get_history(user_id=user_id), many=True).data,
    })


@extend_schema(
    request=AdjustBalanceSerializer,
    responses={201: LedgerTransactionSerializer},
    description="Manual balance correction.",
    tags=['ledger'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAccountant])
def adjust(request):
    serializer = AdjustBalanceSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    entry = adjust_balance(
        user_id=serializer.validated_data['user_id'],
        amount=serializer.validated_data['amount'],
        notes=serializer.validated_data['notes'],
        adjusted_by=request.user,
    )
    return Response({
        'success': True,
        'message': 'Balance adjusted',
        'transaction': LedgerTransactionSerializer(entry).data,
    }, status=status.HTTP_201_CREATED)


@extend_schema(responses={200: BalanceStatsSerializer}, tags=['ledger'])
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAccountant])
def stats(request):
    return Response(BalanceStatsSerializer(get_balance_stats()).data)


@extend_schema(description="Replay a user's ledger and compare it to the stored balance.", tags=['ledger'])
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAccountant])
def verify(request, user_id):
    stored = get_balance(user_id=user_id)
    return Response({
        'user_id': user_id,
        'stored_balance': stored,
        'replayed_balance': replay_balance(user_id=user_id),
        'consistent': verify_ledger(user_id=user_id),
    })
