from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Employee accounts.

    The balance is read-only here: it may only change together with a
    ledger row.
    """

    list_display = ['email', 'name', 'role', 'balance', 'is_active', 'last_login']
    list_filter = ['role', 'is_active']
    search_fields = ['email', 'name']
    ordering = ['-created_at']

    fieldsets = (
        (None, {'fields': ('email', 'name', 'password')}),
        ('Role', {'fields': ('role', 'is_active', 'is_staff', 'is_superuser')}),
        ('Balance', {'fields': ('balance',)}),
        ('Activity', {'fields': ('created_at', 'last_login'), 'classes': ('collapse',)}),
    )
    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'name', 'role', 'password1', 'password2'),
        }),
    )
    readonly_fields = ['balance', 'created_at', 'last_login']
    filter_horizontal = []

    actions = ['deactivate_users']

    @admin.action(description='Deactivate selected users')
    def deactivate_users(self, request, queryset):
        count = queryset.exclude(id=request.user.id).update(is_active=False)
        self.message_user(request, f'Deactivated {count} user(s).')
