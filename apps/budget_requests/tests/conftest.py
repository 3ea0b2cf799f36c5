import pytest
from decimal import Decimal

from apps.budget_requests.services import create_budget_request, review_budget_request, confirm_transfer


@pytest.fixture
def pending_request(user, company, company_access):
    """A pending request for 500.00 filed by the regular user."""
    return create_budget_request(
        user=user,
        company_id=company.id,
        requested_amount=Decimal('500.00'),
        justification='Equipment for the new site',
    )


@pytest.fixture
def approved_request(pending_request, accountant):
    budget_request, _ = review_budget_request(
        request_id=pending_request.id,
        reviewer=accountant,
        action='approve',
    )
    return budget_request


@pytest.fixture
def transferred_request(approved_request, accountant):
    return confirm_transfer(
        request_id=approved_request.id,
        confirmer=accountant,
        transfer_number='PL-TR-0001',
    )
