import pytest
from decimal import Decimal
from django.urls import reverse
from rest_framework import status

from apps.advances.models import Advance, AdvanceStatus


@pytest.mark.django_db
class TestAdvanceApi:

    def test_create(self, accountant_client, user, company):
        response = accountant_client.post(
            reverse('advances:list-create'),
            {
                'user_id': str(user.id),
                'company_id': str(company.id),
                'amount': '250.00',
                'description': 'Trade fair in Poznan',
            },
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['advance']['status'] == AdvanceStatus.PENDING

    def test_regular_user_cannot_create(self, user_client, user, company):
        response = user_client.post(
            reverse('advances:list-create'),
            {
                'user_id': str(user.id),
                'company_id': str(company.id),
                'amount': '250.00',
                'description': 'Trade fair in Poznan',
            },
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert not Advance.objects.exists()

    def test_list(self, accountant_client, pending_advance):
        response = accountant_client.get(reverse('advances:list-create'), {'status': 'pending'})

        assert [a['id'] for a in response.data['results']] == [str(pending_advance.id)]
        assert response.data['next_offset'] is None

    def test_transfer_and_settle(self, accountant_client, pending_advance, user):
        response = accountant_client.post(
            reverse('advances:transfer', args=[pending_advance.id]),
            {'transfer_number': 'TR-55'},
        )
        assert response.status_code == status.HTTP_200_OK
        user.refresh_from_db()
        assert user.balance == Decimal('300.00')

        response = accountant_client.post(reverse('advances:settle', args=[pending_advance.id]))
        assert response.status_code == status.HTTP_200_OK
        assert response.data['advance']['status'] == AdvanceStatus.SETTLED
        assert response.data['linked_invoice_ids'] == []

    def test_second_transfer_is_conflict(self, accountant_client, transferred_advance):
        response = accountant_client.post(reverse('advances:transfer', args=[transferred_advance.id]))

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['error'] == 'conflict'

    def test_detail(self, accountant_client, pending_advance):
        response = accountant_client.get(reverse('advances:detail', args=[pending_advance.id]))

        assert response.data['advance']['id'] == str(pending_advance.id)
        assert response.data['invoices'] == []

    def test_delete_requires_password(self, accountant_client, pending_advance):
        response = accountant_client.delete(
            reverse('advances:detail', args=[pending_advance.id]),
            {'password': 'wrong', 'strategy': 'delete_with_invoices'},
            format='json',
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert Advance.objects.filter(id=pending_advance.id).exists()

    def test_delete(self, accountant_client, pending_advance, password):
        response = accountant_client.delete(
            reverse('advances:detail', args=[pending_advance.id]),
            {'password': password, 'strategy': 'delete_with_invoices'},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert not Advance.objects.filter(id=pending_advance.id).exists()
