"""
Settlement linkage.

Closing an advance or a budget request closes the invoices it funded in
the same transaction. This is the only code path that writes settled
invoices.
"""

import logging
from typing import Iterable, List, Optional
from uuid import UUID

from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from apps.invoices.models import Invoice, InvoiceStatus

logger = logging.getLogger(__name__)


@transaction.atomic
def settle_linked_invoices(
    *,
    settled_by,
    statuses: Iterable[str],
    advance_id: Optional[UUID] = None,
    budget_request_id: Optional[UUID] = None,
) -> List[UUID]:
    """
    Settle every invoice linked to the advance or budget request whose
    status is one of ``statuses``. Returns the ids that were settled.
    """
    if advance_id is None and budget_request_id is None:
        raise ValueError("advance_id or budget_request_id is required")

    link = Q()
    if advance_id is not None:
        link |= Q(advance_id=advance_id)
    if budget_request_id is not None:
        link |= Q(budget_request_id=budget_request_id)

    statuses = list(statuses)
    invoice_ids = list(
        Invoice.objects
        .select_for_update()
        .filter(link, status__in=statuses)
        .values_list('id', flat=True)
    )
    if not invoice_ids:
        return []

    now = timezone.now()
    Invoice.objects.filter(id__in=invoice_ids, status__in=statuses).update(
        status=InvoiceStatus.SETTLED,
        settled_by=settled_by,
        settled_at=now,
        updated_at=now,
    )

    logger.info(
        "Settled %d invoice(s) linked to advance=%s budget_request=%s",
        len(invoice_ids), advance_id, budget_request_id,
    )
    return invoice_ids
