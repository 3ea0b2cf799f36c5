import pytest
from decimal import Decimal
from django.urls import reverse
from rest_framework import status

from apps.advances.models import Advance
from apps.budget_requests.models import BudgetRequest, BudgetRequestStatus


@pytest.mark.django_db
class TestSubmitApi:
    """Tests for /api/budget-requests/"""

    def test_create(self, user_client, company, company_access):
        response = user_client.post(
            reverse('budget_requests:list-create'),
            {
                'company_id': str(company.id),
                'requested_amount': '150.00',
                'justification': 'Train tickets to Krakow',
            },
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['success'] is True
        assert BudgetRequest.objects.filter(id=response.data['request_id']).exists()

    def test_create_without_permission(self, user_client, company):
        response = user_client.post(
            reverse('budget_requests:list-create'),
            {
                'company_id': str(company.id),
                'requested_amount': '150.00',
                'justification': 'Train tickets to Krakow',
            },
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data == {
            'success': False,
            'error': 'forbidden',
            'message': 'You do not have access to this company',
        }

    def test_duplicate_pending_is_conflict(self, user_client, pending_request, company):
        response = user_client.post(
            reverse('budget_requests:list-create'),
            {
                'company_id': str(company.id),
                'requested_amount': '150.00',
                'justification': 'Train tickets to Krakow',
            },
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['error'] == 'conflict'

    def test_list_own(self, user_client, other_user_client, pending_request):
        assert len(user_client.get(reverse('budget_requests:list-create')).data) == 1
        assert other_user_client.get(reverse('budget_requests:list-create')).data == []

    def test_cancel(self, user_client, pending_request):
        response = user_client.delete(reverse('budget_requests:detail', args=[pending_request.id]))

        assert response.status_code == status.HTTP_200_OK
        assert not BudgetRequest.objects.exists()

    def test_foreign_detail_forbidden(self, other_user_client, pending_request):
        response = other_user_client.get(reverse('budget_requests:detail', args=[pending_request.id]))

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestReviewApi:

    def test_user_cannot_review(self, user_client, pending_request):
        response = user_client.post(
            reverse('budget_requests:review', args=[pending_request.id]),
            {'action': 'approve'},
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        pending_request.refresh_from_db()
        assert pending_request.status == BudgetRequestStatus.PENDING
        assert not Advance.objects.exists()

    def test_approve(self, accountant_client, pending_request):
        response = accountant_client.post(
            reverse('budget_requests:review', args=[pending_request.id]),
            {'action': 'approve'},
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['budget_request']['status'] == BudgetRequestStatus.APPROVED
        assert response.data['advance']['amount'] == '500.00'

    def test_reject_short_reason(self, accountant_client, pending_request):
        response = accountant_client.post(
            reverse('budget_requests:review', args=[pending_request.id]),
            {'action': 'reject', 'rejection_reason': 'short'},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'bad_request'

    def test_second_approval_is_conflict(self, accountant_client, approved_request):
        response = accountant_client.post(
            reverse('budget_requests:review', args=[approved_request.id]),
            {'action': 'approve'},
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert Advance.objects.count() == 1

    def test_review_list(self, accountant_client, pending_request):
        response = accountant_client.get(
            reverse('budget_requests:review-list'),
            {'status': 'pending', 'sort_by': 'requested_amount'},
        )

        assert [r['id'] for r in response.data['results']] == [str(pending_request.id)]
        assert response.data['next_offset'] is None

    def test_pending_count(self, accountant_client, pending_request):
        response = accountant_client.get(reverse('budget_requests:pending-count'))

        assert response.data['count'] == 1

    def test_transfer_and_settle(self, accountant_client, approved_request, user, make_invoice):
        response = accountant_client.post(
            reverse('budget_requests:transfer', args=[approved_request.id]),
            {'transfer_number': 'PL-TR-77'},
        )
        assert response.status_code == status.HTTP_200_OK

        invoice = make_invoice(user, budget_request=approved_request, status='accepted')
        response = accountant_client.post(reverse('budget_requests:settle', args=[approved_request.id]))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['linked_invoice_ids'] == [invoice.id]

    def test_related_invoices(self, accountant_client, approved_request, user, make_invoice):
        invoice = make_invoice(user, amount=Decimal('12.00'))

        response = accountant_client.get(
            reverse('budget_requests:related-invoices', args=[approved_request.id])
        )

        assert [i['id'] for i in response.data] == [str(invoice.id)]


@pytest.mark.django_db
class TestBulkDeleteApi:

    def test_admin_bulk_delete(self, admin_client, approved_request, password):
        response = admin_client.post(
            reverse('budget_requests:bulk-delete'),
            {'admin_password': password, 'statuses': ['approved']},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['deleted_count'] == 1

    def test_requires_a_filter(self, admin_client, approved_request, password):
        response = admin_client.post(
            reverse('budget_requests:bulk-delete'),
            {'admin_password': password},
            format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert BudgetRequest.objects.count() == 1

    def test_accountant_cannot_bulk_delete(self, accountant_client, approved_request, password):
        response = accountant_client.post(
            reverse('budget_requests:bulk-delete'),
            {'admin_password': password, 'statuses': ['all']},
            format='json',
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert BudgetRequest.objects.count() == 1
