import pytest
from decimal import Decimal

from apps.advances.models import Advance, AdvanceStatus, AdvanceSource
from apps.advances.services import transfer


@pytest.fixture
def pending_advance(user, company, accountant):
    """Create a manual advance waiting for transfer."""
    return Advance.objects.create(
        user=user,
        company=company,
        amount=Decimal('300.00'),
        description='Business trip to Gdansk',
        status=AdvanceStatus.PENDING,
        source_type=AdvanceSource.MANUAL,
        created_by=accountant,
    )


@pytest.fixture
def transferred_advance(pending_advance, accountant):
    """A pending advance pushed through the transfer service."""
    return transfer(advance_id=pending_advance.id, confirmer=accountant, transfer_number='TR-001')


@pytest.fixture
def other_advance(user, company, accountant):
    return Advance.objects.create(
        user=user,
        company=company,
        amount=Decimal('50.00'),
        description='Office supplies',
        status=AdvanceStatus.PENDING,
        source_type=AdvanceSource.MANUAL,
        created_by=accountant,
    )
