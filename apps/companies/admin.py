from django.contrib import admin
from .models import Company, UserCompanyPermission


class UserCompanyPermissionInline(admin.TabularInline):
    model = UserCompanyPermission
    extra = 0
    fields = ['user', 'granted_by', 'created_at']
    readonly_fields = ['created_at']
    raw_id_fields = ['user', 'granted_by']


@admin.register(Company)
class CompanyAdmin(admin.ModelAdmin):
    list_display = ['name', 'nip', 'active', 'created_at']
    list_filter = ['active']
    search_fields = ['name', 'nip']
    inlines = [UserCompanyPermissionInline]


@admin.register(UserCompanyPermission)
class UserCompanyPermissionAdmin(admin.ModelAdmin):
    list_display = ['user', 'company', 'granted_by', 'created_at']
    list_filter = ['company']
    search_fields = ['user__email', 'company__name']
    raw_id_fields = ['user', 'company', 'granted_by']
