import pytest
from decimal import Decimal

from django.core.files.uploadedfile import SimpleUploadedFile

from apps.invoices.models import InvoiceDeletionRequest
from apps.invoices.services import upload_invoice, claim_for_review


@pytest.fixture
def scan():
    """Return a fake invoice scan upload."""
    return SimpleUploadedFile('scan.jpg', b'\xff\xd8\xff\xe0fake-jpeg', content_type='image/jpeg')


@pytest.fixture
def funded_user(user, fund_user):
    """Regular user holding 100.00."""
    fund_user(user, '100.00')
    return user


@pytest.fixture
def invoice(funded_user, company, company_access, scan):
    """A 30.00 invoice submitted through the upload service."""
    return upload_invoice(
        user=funded_user,
        image=scan,
        company_id=company.id,
        invoice_number='FV/2026/10/001',
        justification='Lunch with a prospective client',
        amount=Decimal('30.00'),
    )


@pytest.fixture
def claimed_invoice(invoice, accountant):
    return claim_for_review(invoice_id=invoice.id, reviewer=accountant)


@pytest.fixture
def deletion_request(invoice, user):
    return InvoiceDeletionRequest.objects.create(
        invoice=invoice,
        invoice_number=invoice.invoice_number,
        requested_by=user,
        reason='Submitted twice by mistake',
    )
