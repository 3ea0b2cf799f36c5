from rest_framework import permissions


class IsAccountant(permissions.BasePermission):
    """
    Permission: User must be an accountant or an admin.
    """
    message = 'Accountant or administrator role required.'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_accountant)


class IsAdmin(permissions.BasePermission):
    """
    Permission: User must be an admin.
    """
    message = 'Administrator role required.'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_admin)

