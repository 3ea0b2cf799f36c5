import pytest
from decimal import Decimal
from uuid import uuid4

from django.core.files.uploadedfile import SimpleUploadedFile
from django.urls import reverse
from rest_framework import status

from apps.invoices.models import Invoice, InvoiceStatus, InvoiceDeletionRequest, DeletionRequestStatus
from apps.ledger.services import get_balance


@pytest.mark.django_db
class TestInvoiceUploadApi:
    """Tests for /api/invoices/"""

    def test_upload(self, user_client, funded_user, company, company_access):
        response = user_client.post(
            reverse('invoices:list-create'),
            {
                'image': SimpleUploadedFile('receipt.png', b'png-bytes', content_type='image/png'),
                'company_id': str(company.id),
                'invoice_number': 'PAR/15',
                'justification': 'Parking at the client site',
                'amount': '12.40',
                'invoice_type': 'paragon',
            },
            format='multipart',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['invoice']['status'] == InvoiceStatus.PENDING
        assert 'image_key' not in response.data['invoice']
        assert get_balance(user_id=funded_user.id) == Decimal('87.60')

    def test_upload_requires_scan(self, user_client, company, company_access):
        response = user_client.post(
            reverse('invoices:list-create'),
            {
                'company_id': str(company.id),
                'invoice_number': 'PAR/15',
                'justification': 'Parking at the client site',
            },
            format='multipart',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'image' in response.data['details']

    def test_upload_without_company_access(self, user_client, company, scan):
        response = user_client.post(
            reverse('invoices:list-create'),
            {
                'image': scan,
                'company_id': str(company.id),
                'invoice_number': 'PAR/15',
                'justification': 'Parking at the client site',
            },
            format='multipart',
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data['error'] == 'forbidden'
        assert not Invoice.objects.exists()

    def test_list_own(self, user_client, other_user_client, invoice):
        response = user_client.get(reverse('invoices:list-create'))

        assert [row['id'] for row in response.data] == [str(invoice.id)]
        assert other_user_client.get(reverse('invoices:list-create')).data == []

    def test_unauthenticated(self, api_client):
        response = api_client.get(reverse('invoices:list-create'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestInvoiceDetailApi:

    def test_owner_and_reviewer_can_view(self, user_client, accountant_client, invoice):
        url = reverse('invoices:detail', args=[invoice.id])

        assert user_client.get(url).data['invoice_number'] == 'FV/2026/10/001'
        assert accountant_client.get(url).status_code == status.HTTP_200_OK

    def test_other_user_cannot_view(self, other_user_client, invoice):
        response = other_user_client.get(reverse('invoices:detail', args=[invoice.id]))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_unknown_invoice(self, user_client):
        response = user_client.get(reverse('invoices:detail', args=[uuid4()]))

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['error'] == 'not_found'

    def test_image(self, user_client, invoice):
        response = user_client.get(reverse('invoices:image', args=[invoice.id]))

        assert response.status_code == status.HTTP_200_OK
        assert response['Content-Type'] == 'image/jpeg'
        assert b''.join(response.streaming_content).startswith(b'\xff\xd8')

    def test_accountant_edits(self, accountant_client, invoice):
        response = accountant_client.patch(
            reverse('invoices:detail', args=[invoice.id]),
            {'description': 'Team lunch'},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['invoice']['description'] == 'Team lunch'

    def test_edit_history(self, accountant_client, user_client, invoice):
        accountant_client.patch(
            reverse('invoices:detail', args=[invoice.id]),
            {'invoice_number': 'FV/2026/10/001-B'},
            format='json',
        )

        response = user_client.get(reverse('invoices:history', args=[invoice.id]))

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data['history']) == 1
        assert response.data['history'][0]['previous_invoice_number'] == 'FV/2026/10/001'
        assert response.data['history'][0]['new_invoice_number'] == 'FV/2026/10/001-B'

    def test_user_cannot_edit(self, user_client, invoice):
        response = user_client.patch(
            reverse('invoices:detail', args=[invoice.id]),
            {'description': 'Team lunch'},
            format='json',
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_admin_deletes(self, admin_client, invoice, password, funded_user):
        response = admin_client.delete(
            reverse('invoices:detail', args=[invoice.id]),
            {'admin_password': password},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert not Invoice.objects.filter(id=invoice.id).exists()
        assert get_balance(user_id=funded_user.id) == Decimal('100.00')

    def test_admin_delete_wrong_password(self, admin_client, invoice):
        response = admin_client.delete(
            reverse('invoices:detail', args=[invoice.id]),
            {'admin_password': 'WrongPass123!'},
            format='json',
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data['error'] == 'unauthorized'
        assert Invoice.objects.filter(id=invoice.id).exists()

    def test_accountant_cannot_delete(self, accountant_client, invoice, password):
        response = accountant_client.delete(
            reverse('invoices:detail', args=[invoice.id]),
            {'admin_password': password},
            format='json',
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestInvoiceReviewApi:

    def test_review_queue_requires_reviewer(self, user_client):
        response = user_client.get(reverse('invoices:review-list'))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_review_queue(self, accountant_client, invoice):
        response = accountant_client.get(reverse('invoices:review-list'), {'status': 'pending'})

        assert [row['id'] for row in response.data['results']] == [str(invoice.id)]
        assert response.data['next_offset'] is None

    def test_claim_review_and_transfer(self, accountant_client, invoice):
        claim = accountant_client.post(reverse('invoices:claim', args=[invoice.id]))
        assert claim.data['invoice']['status'] == InvoiceStatus.IN_REVIEW

        review = accountant_client.post(
            reverse('invoices:review', args=[invoice.id]),
            {'status': 'accepted'},
            format='json',
        )
        assert review.data['invoice']['status'] == InvoiceStatus.ACCEPTED

        transfer = accountant_client.post(reverse('invoices:mark-transferred', args=[invoice.id]))
        assert transfer.data['invoice']['status'] == InvoiceStatus.TRANSFERRED

    def test_claim_held_by_someone_else(self, claimed_invoice, other_accountant_client):
        response = other_accountant_client.post(reverse('invoices:claim', args=[claimed_invoice.id]))

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['error'] == 'conflict'

    def test_release(self, accountant_client, claimed_invoice):
        response = accountant_client.post(reverse('invoices:release', args=[claimed_invoice.id]))

        assert response.data['invoice']['status'] == InvoiceStatus.PENDING

    def test_reject_without_reason(self, accountant_client, claimed_invoice):
        response = accountant_client.post(
            reverse('invoices:review', args=[claimed_invoice.id]),
            {'status': 'rejected'},
            format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_heartbeat(self, accountant_client, claimed_invoice):
        response = accountant_client.post(reverse('invoices:heartbeat', args=[claimed_invoice.id]))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['invoice']['last_review_ping'] is not None

    def test_heartbeat_by_someone_else(self, other_accountant_client, claimed_invoice):
        response = other_accountant_client.post(reverse('invoices:heartbeat', args=[claimed_invoice.id]))

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_user_cannot_claim(self, user_client, invoice):
        response = user_client.post(reverse('invoices:claim', args=[invoice.id]))

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestDeletionRequestApi:

    def test_request_and_approve(self, user_client, admin_client, invoice, password, funded_user):
        created = user_client.post(
            reverse('invoices:deletion-request-create', args=[invoice.id]),
            {'reason': 'Submitted twice by mistake'},
            format='json',
        )
        assert created.status_code == status.HTTP_201_CREATED
        request_id = created.data['deletion_request']['id']

        response = admin_client.post(
            reverse('invoices:deletion-request-review', args=[request_id]),
            {'action': 'approve', 'admin_password': password},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['deletion_request']['status'] == DeletionRequestStatus.APPROVED
        assert response.data['deletion_request']['invoice'] is None
        assert get_balance(user_id=funded_user.id) == Decimal('100.00')

    def test_duplicate_request(self, user_client, deletion_request, invoice):
        response = user_client.post(
            reverse('invoices:deletion-request-create', args=[invoice.id]),
            {'reason': 'Submitted twice by mistake'},
            format='json',
        )

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_review_requires_admin(self, accountant_client, deletion_request, password):
        response = accountant_client.post(
            reverse('invoices:deletion-request-review', args=[deletion_request.id]),
            {'action': 'approve', 'admin_password': password},
            format='json',
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert InvoiceDeletionRequest.objects.get(id=deletion_request.id).status == DeletionRequestStatus.PENDING

    def test_review_wrong_password(self, admin_client, deletion_request):
        response = admin_client.post(
            reverse('invoices:deletion-request-review', args=[deletion_request.id]),
            {'action': 'approve', 'admin_password': 'WrongPass123!'},
            format='json',
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_admin_list(self, admin_client, user_client, deletion_request):
        response = admin_client.get(reverse('invoices:deletion-request-list'), {'status': 'pending'})

        assert [row['id'] for row in response.data] == [str(deletion_request.id)]
        assert user_client.get(reverse('invoices:deletion-request-list')).status_code == status.HTTP_403_FORBIDDEN

    def test_mine_and_cancel(self, user_client, deletion_request):
        mine = user_client.get(reverse('invoices:deletion-request-mine'))
        assert [row['id'] for row in mine.data] == [str(deletion_request.id)]

        response = user_client.delete(reverse('invoices:deletion-request-cancel', args=[deletion_request.id]))

        assert response.status_code == status.HTTP_200_OK
        assert not InvoiceDeletionRequest.objects.exists()
