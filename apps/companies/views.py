from rest_framework import viewsets, mixins, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import IsAdmin

from .models import Company
from .serializers import (
    CompanySerializer,
    UserPermissionsSerializer,
    SetPermissionsSerializer,
    CompanyIdSerializer,
)
from .services import (
    list_companies_for_user,
    create_company,
    update_company,
    list_user_permissions,
    set_user_permissions,
    grant_company_permission,
    revoke_company_permission,
)


class CompanyViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.UpdateModelMixin,
    viewsets.GenericViewSet,
):
    """
    Companies.

    list: Companies visible to the caller
    create: Create a company (admin only)
    partial_update: Edit a company (admin only)
    """

    serializer_class = CompanySerializer
    permission_classes = [IsAuthenticated]
    http_method_names = ['get', 'post', 'patch', 'head', 'options']

    def get_queryset(self):
        if self.action in ['list', 'retrieve']:
            return list_companies_for_user(user=self.request.user)
        return Company.objects.all()

    def get_permissions(self):
        """Set permissions based on action."""
        if self.action in ['create', 'update', 'partial_update']:
            return [IsAuthenticated(), IsAdmin()]
        return [IsAuthenticated()]

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        company = create_company(**serializer.validated_data)
        return Response(CompanySerializer(company).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        company = update_company(company_id=self.kwargs['pk'], **serializer.validated_data)
        return Response(CompanySerializer(company).data)


@extend_schema(
    responses={200: UserPermissionsSerializer(many=True)},
    description="Permission matrix of every regular user.",
    tags=['companies'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdmin])
def permission_matrix(request):
    rows = list_user_permissions()
    return Response(UserPermissionsSerializer(rows, many=True).data)


@extend_schema(
    request=SetPermissionsSerializer,
    responses={200: SetPermissionsSerializer},
    description="Replace a user's permitted companies.",
    tags=['companies'],
)
@api_view(['PUT'])
@permission_classes([IsAuthenticated, IsAdmin])
def user_permissions(request, user_id):
    serializer = SetPermissionsSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    company_ids = set_user_permissions(
        user_id=user_id,
        company_ids=serializer.validated_data['company_ids'],
        granted_by=request.user,
    )
    return Response({
        'success': True,
        'message': 'Permissions updated',
        'company_ids': company_ids,
    })


@extend_schema(
    request=CompanyIdSerializer,
    description="Grant access to one company.",
    tags=['companies'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdmin])
def grant_permission(request, user_id):
    serializer = CompanyIdSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    grant_company_permission(
        user_id=user_id,
        company_id=serializer.validated_data['company_id'],
        granted_by=request.user,
    )
    return Response({'success': True, 'message': 'Permission granted'})


@extend_schema(
    request=CompanyIdSerializer,
    description="Revoke access to one company.",
    tags=['companies'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdmin])
def revoke_permission(request, user_id):
    serializer = CompanyIdSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    removed = revoke_company_permission(
        user_id=user_id,
        company_id=serializer.validated_data['company_id'],
        revoked_by=request.user,
    )
    return Response({
        'success': True,
        'message': 'Permission revoked' if removed else 'Permission was not granted',
    })
