from rest_framework.decorators import api_view, permission_classes
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter

from .serializers import NotificationSerializer
from .services import list_notifications, get_unread_count, mark_read, mark_all_read


class NotificationPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


@extend_schema(
    parameters=[OpenApiParameter('unread', bool, description='Only unread notifications')],
    responses={200: NotificationSerializer(many=True)},
    tags=['notifications'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def notification_list(request):
    unread_only = request.query_params.get('unread', '').lower() in ('1', 'true')
    notifications = list_notifications(user=request.user, unread_only=unread_only)

    paginator = NotificationPagination()
    page = paginator.paginate_queryset(notifications, request)
    return paginator.get_paginated_response(NotificationSerializer(page, many=True).data)


@extend_schema(tags=['notifications'])
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def unread_count(request):
    return Response({'count': get_unread_count(user=request.user)})


@extend_schema(request=None, tags=['notifications'])
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def notification_mark_read(request, pk):
    mark_read(user=request.user, notification_id=pk)
    return Response({'success': True, 'message': 'Marked as read'})


@extend_schema(request=None, tags=['notifications'])
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def notification_mark_all_read(request):
    count = mark_all_read(user=request.user)
    return Response({'success': True, 'message': f'{count} notification(s) marked as read'})
