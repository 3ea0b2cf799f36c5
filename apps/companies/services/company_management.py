"""Company management service."""

import logging
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet

from apps.companies.models import Company

from .exceptions import CompanyNotFoundError
from .permission_matrix import get_user_company_ids

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = ('name', 'nip', 'address', 'active')


def list_companies_for_user(*, user) -> QuerySet:
    """Active companies visible to the caller."""
    return Company.objects.filter(id__in=get_user_company_ids(user=user))


@transaction.atomic
def create_company(*, name: str, nip: str = '', address: str = '', active: bool = True) -> Company:
    company = Company.objects.create(name=name, nip=nip, address=address, active=active)
    logger.info("Company %s created", company.id)
    return company


@transaction.atomic
def update_company(*, company_id: UUID, **data) -> Company:
    """
    Admin edit of a company.

    Raises:
        CompanyNotFoundError: If company doesn't exist
    """
    try:
        company = Company.objects.select_for_update().get(id=company_id)
    except Company.DoesNotExist:
        raise CompanyNotFoundError(f"Company {company_id} not found")

    fields = [field for field in _UPDATABLE_FIELDS if field in data]
    for field in fields:
        setattr(company, field, data[field])
    if fields:
        company.save(update_fields=fields + ['updated_at'])
        logger.info("Company %s updated (%s)", company.id, ', '.join(fields))

    return company
