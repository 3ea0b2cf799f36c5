"""Advance read side."""

from typing import List, Optional, Tuple
from uuid import UUID

from django.db.models import Q

from apps.advances.models import Advance, AdvanceSource
from apps.budget_requests.models import BudgetRequest
from apps.invoices.models import Invoice

from .exceptions import AdvanceNotFoundError


def list_advances(
    *,
    status: Optional[str] = None,
    user_id: Optional[UUID] = None,
    search: str = '',
    limit: int = 50,
    offset: int = 0,
) -> Tuple[List[Advance], Optional[int]]:
    """Advances newest first, plus the offset of the next page (or None)."""
    advances = Advance.objects.select_related('user', 'company', 'created_by')
    if status:
        advances = advances.filter(status=status)
    if user_id:
        advances = advances.filter(user_id=user_id)
    if search:
        advances = advances.filter(
            Q(user__email__icontains=search)
            | Q(user__name__icontains=search)
            | Q(description__icontains=search)
            | Q(transfer_number__icontains=search)
        )

    # One extra row tells whether another page exists
    page = list(advances[offset:offset + limit + 1])
    next_offset = offset + limit if len(page) > limit else None
    return page[:limit], next_offset


def get_advance_detail(*, advance_id: UUID) -> dict:
    """
    The advance with its source budget request, linked invoices and the
    user's previous advance.
    """
    try:
        advance = Advance.objects.select_related(
            'user', 'company', 'created_by', 'transfer_confirmed_by', 'settled_by'
        ).get(id=advance_id)
    except Advance.DoesNotExist:
        raise AdvanceNotFoundError(f"Advance {advance_id} not found")

    budget_request = None
    if advance.source_type == AdvanceSource.BUDGET_REQUEST and advance.source_id:
        budget_request = BudgetRequest.objects.filter(id=advance.source_id).first()

    previous_advance = (
        Advance.objects
        .filter(user_id=advance.user_id, created_at__lt=advance.created_at)
        .order_by('-created_at')
        .first()
    )

    return {
        'advance': advance,
        'budget_request': budget_request,
        'invoices': list(Invoice.objects.filter(advance_id=advance.id).select_related('company')),
        'previous_advance': previous_advance,
    }
