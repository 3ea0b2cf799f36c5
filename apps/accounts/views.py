from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken
from drf_spectacular.utils import extend_schema

from .permissions import IsAdmin
from .serializers import (
    UserRegistrationSerializer,
    UserLoginSerializer,
    UserSerializer,
    DirectoryUserSerializer,
    UserCreateSerializer,
    UserUpdateSerializer,
    UserListQuerySerializer,
    PasswordResetSerializer,
    PasswordChangeSerializer,
)
from .services import (
    register_user,
    authenticate_user,
    list_users,
    create_user_account,
    update_user_account,
    reset_user_password,
    change_password,
)


class TokenPairSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()


class SessionResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    message = serializers.CharField()
    user = UserSerializer()
    tokens = TokenPairSerializer()


def _session_response(user, message, status_code=status.HTTP_200_OK):
    """Principal plus a fresh JWT pair."""
    refresh = RefreshToken.for_user(user)
    return Response({
        'success': True,
        'message': message,
        'user': UserSerializer(user).data,
        'tokens': {
            'refresh': str(refresh),
            'access': str(refresh.access_token),
        },
    }, status=status_code)


# =============================================================================
# SESSION
# =============================================================================

@extend_schema(
    request=UserRegistrationSerializer,
    responses={201: SessionResponseSerializer},
    description="Self-registration. Always creates a regular user.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    serializer = UserRegistrationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    user = register_user(
        email=serializer.validated_data['email'],
        password=serializer.validated_data['password'],
        name=serializer.validated_data['name'],
    )
    return _session_response(user, 'Registration successful', status.HTTP_201_CREATED)


@extend_schema(
    request=UserLoginSerializer,
    responses={200: SessionResponseSerializer},
    description="Exchange email and password for a JWT pair.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    serializer = UserLoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    user = authenticate_user(**serializer.validated_data)
    return _session_response(user, 'Login successful')


@extend_schema(
    responses={200: UserSerializer},
    description="Current principal with its balance.",
    tags=['auth'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_current_user(request):
    return Response(UserSerializer(request.user).data)


@extend_schema(request=PasswordChangeSerializer, tags=['auth'])
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def password_change(request):
    serializer = PasswordChangeSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    change_password(user=request.user, **serializer.validated_data)
    return Response({'success': True, 'message': 'Password changed'})


# =============================================================================
# USER DIRECTORY (admin)
# =============================================================================

@extend_schema(
    parameters=[UserListQuerySerializer],
    request=UserCreateSerializer,
    responses={200: DirectoryUserSerializer(many=True), 201: DirectoryUserSerializer},
    description="GET: list accounts. POST: provision an account with any role.",
    tags=['users'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdmin])
def user_list_create(request):
    if request.method == 'GET':
        query = UserListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        return Response(DirectoryUserSerializer(list_users(**query.validated_data), many=True).data)

    serializer = UserCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    user = create_user_account(admin=request.user, **serializer.validated_data)
    return Response({
        'success': True,
        'message': 'User created',
        'user': DirectoryUserSerializer(user).data,
    }, status=status.HTTP_201_CREATED)


@extend_schema(request=UserUpdateSerializer, responses={200: DirectoryUserSerializer}, tags=['users'])
@api_view(['PATCH'])
@permission_classes([IsAuthenticated, IsAdmin])
def user_update(request, pk):
    serializer = UserUpdateSerializer(data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)

    user = update_user_account(admin=request.user, user_id=pk, **serializer.validated_data)
    return Response({
        'success': True,
        'message': 'User updated',
        'user': DirectoryUserSerializer(user).data,
    })


@extend_schema(request=PasswordResetSerializer, tags=['users'])
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdmin])
def user_password_reset(request, pk):
    serializer = PasswordResetSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    reset_user_password(
        admin=request.user,
        admin_password=serializer.validated_data['admin_password'],
        user_id=pk,
        new_password=serializer.validated_data['new_password'],
    )
    return Response({'success': True, 'message': 'Password reset'})
