"""Admin bulk deletion of budget requests."""

import logging
from datetime import date, datetime, time, timedelta
from typing import Optional

from django.db.models import Q
from django.utils import timezone

from apps.accounts.models import User
from apps.accounts.services import verify_password
from apps.budget_requests.models import BudgetRequest, BudgetRequestStatus

from .exceptions import BudgetRequestValidationError

logger = logging.getLogger(__name__)

ALL_STATUSES = 'all'


def _start_of(day: date) -> datetime:
    return timezone.make_aware(datetime.combine(day, time.min))


def _months_ago(months: int) -> datetime:
    now = timezone.localtime()
    month_index = now.year * 12 + (now.month - 1) - months
    year, month = divmod(month_index, 12)
    day = min(now.day, 28)
    return now.replace(year=year, month=month + 1, day=day)


def build_bulk_delete_filter(
    *,
    statuses=None,
    user_id=None,
    older_than_months: Optional[int] = None,
    year: Optional[int] = None,
    month: Optional[int] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> Q:
    """AND of every given filter. ``statuses`` containing ``all`` disables the status filter."""
    conditions = Q()

    statuses = list(statuses or [])
    if statuses and ALL_STATUSES not in statuses:
        unknown = set(statuses) - set(BudgetRequestStatus.values)
        if unknown:
            raise BudgetRequestValidationError(f"Unknown statuses: {', '.join(sorted(unknown))}")
        conditions &= Q(status__in=statuses)

    if user_id:
        conditions &= Q(user_id=user_id)

    if older_than_months:
        conditions &= Q(created_at__lt=_months_ago(older_than_months))

    if year:
        if month:
            if not 1 <= month <= 12:
                raise BudgetRequestValidationError("Month must be between 1 and 12")
            start = date(year, month, 1)
            end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
        else:
            start, end = date(year, 1, 1), date(year + 1, 1, 1)
        conditions &= Q(created_at__gte=_start_of(start), created_at__lt=_start_of(end))
    elif month:
        raise BudgetRequestValidationError("Month filter requires a year")

    if date_from:
        conditions &= Q(created_at__gte=_start_of(date_from))
    if date_to:
        conditions &= Q(created_at__lt=_start_of(date_to + timedelta(days=1)))

    return conditions


def bulk_delete_budget_requests(*, admin: User, admin_password: str, **filters) -> int:
    """
    Hard-delete every request matching the filters. Returns the number deleted.

    Raises:
        InvalidPasswordError: password re-verification failed
        BudgetRequestValidationError: invalid filters
    """
    verify_password(user=admin, password=admin_password)

    conditions = build_bulk_delete_filter(**filters)
    deleted, _ = BudgetRequest.objects.filter(conditions).delete()

    logger.info("Admin %s bulk-deleted %d budget request(s) with %s", admin.id, deleted, filters)
    return deleted
