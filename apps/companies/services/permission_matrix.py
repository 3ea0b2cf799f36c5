"""
Permission matrix service.

A regular user may transact against a company only when the company is in
the user's permission set. Accountants and admins have implicit access.
"""

import logging
from typing import Iterable, List
from uuid import UUID

from django.db import transaction
from django.contrib.auth import get_user_model

from apps.accounts.models import UserRole
from apps.companies.models import Company, UserCompanyPermission

from .exceptions import (
    CompanyNotFoundError,
    CompanyAccessDeniedError,
    InvalidPermissionTargetError,
    PermissionUserNotFoundError,
)

logger = logging.getLogger(__name__)

User = get_user_model()


def has_company_permission(*, user: User, company_id: UUID) -> bool:
    """Set-membership test against the user's permitted companies."""
    if user.is_accountant:
        return True
    return UserCompanyPermission.objects.filter(
        user_id=user.id,
        company_id=company_id,
    ).exists()


def get_user_company_ids(*, user: User) -> List[UUID]:
    """Active companies the user may transact against."""
    companies = Company.objects.filter(active=True)
    if not user.is_accountant:
        companies = companies.filter(user_permissions__user_id=user.id)
    return list(companies.values_list('id', flat=True))


def ensure_company_access(*, user: User, company_id: UUID) -> Company:
    """
    Load a company the user is allowed to use.

    Raises:
        CompanyNotFoundError: If company doesn't exist
        CompanyAccessDeniedError: If a regular user lacks permission
    """
    try:
        company = Company.objects.get(id=company_id)
    except Company.DoesNotExist:
        raise CompanyNotFoundError(f"Company {company_id} not found")

    if not has_company_permission(user=user, company_id=company.id):
        raise CompanyAccessDeniedError("You do not have access to this company")

    return company


def _get_regular_user(user_id: UUID) -> User:
    try:
        user = User.objects.get(id=user_id)
    except User.DoesNotExist:
        raise PermissionUserNotFoundError(f"User {user_id} not found")
    if user.role != UserRole.USER:
        raise InvalidPermissionTargetError(
            "Accountants and administrators have access to every company"
        )
    return user


def _validate_company_ids(company_ids: Iterable[UUID]) -> List[UUID]:
    wanted = set(company_ids)
    found = set(Company.objects.filter(id__in=wanted).values_list('id', flat=True))
    missing = wanted - found
    if missing:
        raise InvalidPermissionTargetError(
            f"Unknown companies: {', '.join(sorted(str(c) for c in missing))}"
        )
    return sorted(found, key=str)


@transaction.atomic
def grant_company_permission(
    *,
    user_id: UUID,
    company_id: UUID,
    granted_by: User
) -> UserCompanyPermission:
    """Add one company to a regular user's permission set (idempotent)."""
    user = _get_regular_user(user_id)
    _validate_company_ids([company_id])

    permission, created = UserCompanyPermission.objects.get_or_create(
        user=user,
        company_id=company_id,
        defaults={'granted_by': granted_by},
    )
    if created:
        logger.info("Company %s granted to user %s by %s", company_id, user.id, granted_by.id)
    return permission


@transaction.atomic
def revoke_company_permission(*, user_id: UUID, company_id: UUID, revoked_by: User) -> bool:
    """Remove one company from the set. Returns whether a row was removed."""
    user = _get_regular_user(user_id)
    deleted, _ = UserCompanyPermission.objects.filter(
        user=user,
        company_id=company_id,
    ).delete()
    if deleted:
        logger.info("Company %s revoked from user %s by %s", company_id, user.id, revoked_by.id)
    return bool(deleted)


@transaction.atomic
def set_user_permissions(
    *,
    user_id: UUID,
    company_ids: Iterable[UUID],
    granted_by: User
) -> List[UUID]:
    """Replace the user's permission set. Returns the new set."""
    user = _get_regular_user(user_id)
    company_ids = _validate_company_ids(company_ids)

    UserCompanyPermission.objects.filter(user=user).exclude(company_id__in=company_ids).delete()
    existing = set(
        UserCompanyPermission.objects.filter(user=user).values_list('company_id', flat=True)
    )
    UserCompanyPermission.objects.bulk_create([
        UserCompanyPermission(user=user, company_id=company_id, granted_by=granted_by)
        for company_id in company_ids
        if company_id not in existing
    ])

    logger.info(
        "Permission set of user %s replaced by %s (%d companies)",
        user.id, granted_by.id, len(company_ids),
    )
    return company_ids


def list_user_permissions():
    """Regular users with their permitted company ids, for the admin matrix view."""
    users = (
        User.objects
        .filter(role=UserRole.USER)
        .prefetch_related('company_permissions')
        .order_by('email')
    )
    return [
        {
            'user': user,
            'company_ids': sorted(
                (p.company_id for p in user.company_permissions.all()), key=str
            ),
        }
        for user in users
    ]
