from rest_framework import serializers
from .models import Company


class CompanySerializer(serializers.ModelSerializer):
    """Company representation used in lists and admin edits."""

    class Meta:
        model = Company
        fields = ['id', 'name', 'nip', 'address', 'active', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']


class UserPermissionsSerializer(serializers.Serializer):
    """One row of the permission matrix."""
    user_id = serializers.UUIDField(source='user.id')
    email = serializers.EmailField(source='user.email')
    name = serializers.CharField(source='user.name')
    company_ids = serializers.ListField(child=serializers.UUIDField())


class SetPermissionsSerializer(serializers.Serializer):
    company_ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=True)


class CompanyIdSerializer(serializers.Serializer):
    company_id = serializers.UUIDField()
