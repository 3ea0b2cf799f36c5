"""
Companies app services layer.

Company CRUD and the per-user permission matrix consulted by every
workflow that files something against a company.
"""

from .exceptions import (
    CompanyNotFoundError,
    CompanyAccessDeniedError,
    InvalidPermissionTargetError,
    PermissionUserNotFoundError,
)
from .permission_matrix import (
    has_company_permission,
    get_user_company_ids,
    ensure_company_access,
    grant_company_permission,
    revoke_company_permission,
    set_user_permissions,
    list_user_permissions,
)
from .company_management import (
    list_companies_for_user,
    create_company,
    update_company,
)

__all__ = [
    # Exceptions
    'CompanyNotFoundError',
    'CompanyAccessDeniedError',
    'InvalidPermissionTargetError',
    'PermissionUserNotFoundError',
    # Permission matrix
    'has_company_permission',
    'get_user_company_ids',
    'ensure_company_access',
    'grant_company_permission',
    'revoke_company_permission',
    'set_user_permissions',
    'list_user_permissions',
    # Company management
    'list_companies_for_user',
    'create_company',
    'update_company',
]
