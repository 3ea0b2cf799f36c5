from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

from .models import User, UserRole


def _password_field(**kwargs):
    return serializers.CharField(write_only=True, style={'input_type': 'password'}, **kwargs)


class UserSerializer(serializers.ModelSerializer):
    """Current principal, including the running balance."""

    class Meta:
        model = User
        fields = ['id', 'email', 'name', 'role', 'balance', 'created_at', 'last_login']
        read_only_fields = fields


class UserSummarySerializer(serializers.ModelSerializer):
    """Compact user reference embedded in workflow payloads."""

    class Meta:
        model = User
        fields = ['id', 'email', 'name']
        read_only_fields = fields


class DirectoryUserSerializer(serializers.ModelSerializer):
    """Row of the admin user directory."""

    class Meta:
        model = User
        fields = ['id', 'email', 'name', 'role', 'balance', 'is_active', 'created_at', 'last_login']
        read_only_fields = fields


class UserRegistrationSerializer(serializers.Serializer):
    email = serializers.EmailField()
    name = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    password = _password_field(validators=[validate_password])
    password_confirm = _password_field()

    def validate(self, attrs):
        if attrs['password'] != attrs['password_confirm']:
            raise serializers.ValidationError({'password_confirm': 'Passwords do not match'})
        return attrs


class UserLoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = _password_field()


class UserCreateSerializer(serializers.Serializer):
    email = serializers.EmailField()
    name = serializers.CharField(max_length=255)
    role = serializers.ChoiceField(choices=UserRole.values)
    password = _password_field()


class UserUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, required=False)
    role = serializers.ChoiceField(choices=UserRole.values, required=False)
    is_active = serializers.BooleanField(required=False)


class UserListQuerySerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=UserRole.values, required=False)
    search = serializers.CharField(required=False, allow_blank=True, default='')
    include_inactive = serializers.BooleanField(required=False, default=False)


class PasswordResetSerializer(serializers.Serializer):
    admin_password = _password_field()
    new_password = _password_field()
    new_password_confirm = _password_field()

    def validate(self, attrs):
        if attrs['new_password'] != attrs['new_password_confirm']:
            raise serializers.ValidationError({'new_password_confirm': 'Passwords do not match'})
        return attrs


class PasswordChangeSerializer(serializers.Serializer):
    current_password = _password_field()
    new_password = _password_field()
