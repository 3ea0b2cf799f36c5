"""Budget request read side."""

from typing import List, Optional, Tuple
from uuid import UUID

from django.db.models import Q
from django.utils import timezone

from apps.accounts.models import User
from apps.budget_requests.models import BudgetRequest, BudgetRequestStatus
from apps.invoices.models import Invoice

from .exceptions import (
    BudgetRequestNotFoundError,
    BudgetRequestValidationError,
    BudgetRequestAccessDeniedError,
)

SORT_FIELDS = {
    'created_at': 'created_at',
    'requested_amount': 'requested_amount',
    'status': 'status',
}
RELATED_INVOICES_LIMIT = 50

_RELATED = ('user', 'company', 'reviewed_by', 'transfer_confirmed_by', 'settled_by')


def list_own_requests(*, user: User) -> List[BudgetRequest]:
    return list(
        BudgetRequest.objects
        .filter(user=user)
        .select_related('company', 'reviewed_by')
    )


def list_requests(
    *,
    status: Optional[str] = None,
    user_id: Optional[UUID] = None,
    search: str = '',
    sort_by: str = 'created_at',
    sort_order: str = 'desc',
    limit: int = 50,
    offset: int = 0,
) -> Tuple[List[BudgetRequest], Optional[int]]:
    """Reviewer listing plus the offset of the next page (or None)."""
    if sort_by not in SORT_FIELDS:
        raise BudgetRequestValidationError(f"Cannot sort by {sort_by}")

    requests = BudgetRequest.objects.select_related(*_RELATED)
    if status and status != 'all':
        requests = requests.filter(status=status)
    if user_id:
        requests = requests.filter(user_id=user_id)
    if search and search.strip():
        term = search.strip()
        requests = requests.filter(
            Q(user__name__icontains=term)
            | Q(user__email__icontains=term)
            | Q(justification__icontains=term)
        )

    ordering = SORT_FIELDS[sort_by]
    if sort_order != 'asc':
        ordering = f'-{ordering}'
    requests = requests.order_by(ordering, '-id')

    page = list(requests[offset:offset + limit + 1])
    next_offset = offset + limit if len(page) > limit else None
    return page[:limit], next_offset


def get_request(*, request_id: UUID) -> BudgetRequest:
    try:
        return BudgetRequest.objects.select_related(*_RELATED).get(id=request_id)
    except BudgetRequest.DoesNotExist:
        raise BudgetRequestNotFoundError(f"Budget request {request_id} not found")


def get_pending_count() -> int:
    return BudgetRequest.objects.filter(status=BudgetRequestStatus.PENDING).count()


def get_related_invoices(*, request_id: UUID) -> List[Invoice]:
    """
    Invoices the owner submitted between the review of the request and its
    settlement (or now, while unsettled). Empty until reviewed.
    """
    budget_request = get_request(request_id=request_id)
    if budget_request.reviewed_at is None:
        return []

    end = timezone.now()
    if budget_request.status == BudgetRequestStatus.SETTLED and budget_request.settled_at:
        end = budget_request.settled_at

    return list(
        Invoice.objects
        .filter(
            user_id=budget_request.user_id,
            created_at__gte=budget_request.reviewed_at,
            created_at__lte=end,
        )
        .order_by('-created_at')[:RELATED_INVOICES_LIMIT]
    )


def get_visible_request(*, request_id: UUID, viewer: User) -> BudgetRequest:
    """Reviewers see every request, users only their own."""
    budget_request = get_request(request_id=request_id)
    if budget_request.user_id != viewer.id and not viewer.is_accountant:
        raise BudgetRequestAccessDeniedError()
    return budget_request
