"""Principals and companies shared by every app's tests."""

from decimal import Decimal

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User, UserRole
from apps.companies.models import Company, UserCompanyPermission
from apps.invoices.models import Invoice
from apps.ledger.models import TransactionType
from apps.ledger.services import apply_balance_change

PASSWORD = 'TestPass123!'


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def password():
    return PASSWORD


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a regular user."""
    return User.objects.create_user(
        email='testuser@example.com',
        password=PASSWORD,
        name='Test User',
    )


@pytest.fixture
def other_user(db):
    """Create and return another regular user."""
    return User.objects.create_user(
        email='otheruser@example.com',
        password=PASSWORD,
        name='Other User',
    )


@pytest.fixture
def accountant(db):
    """Create and return an accountant."""
    return User.objects.create_user(
        email='accountant@example.com',
        password=PASSWORD,
        name='Anna Accountant',
        role=UserRole.ACCOUNTANT,
    )


@pytest.fixture
def other_accountant(db):
    return User.objects.create_user(
        email='accountant2@example.com',
        password=PASSWORD,
        name='Second Accountant',
        role=UserRole.ACCOUNTANT,
    )


@pytest.fixture
def admin_user(db):
    """Create and return an administrator."""
    return User.objects.create_user(
        email='admin@example.com',
        password=PASSWORD,
        name='Adam Admin',
        role=UserRole.ADMIN,
    )


@pytest.fixture
def company(db):
    return Company.objects.create(name='Acme Sp. z o.o.', nip='5260250274')


@pytest.fixture
def other_company(db):
    return Company.objects.create(name='Globex S.A.', nip='7740001454')


@pytest.fixture
def company_access(user, company):
    """Grant ``user`` access to ``company``."""
    return UserCompanyPermission.objects.create(user=user, company=company)


@pytest.fixture
def fund_user():
    """Top up a user's balance through the ledger."""
    def _fund(target, amount):
        return apply_balance_change(
            user_id=target.id,
            amount=Decimal(amount),
            transaction_type=TransactionType.TOP_UP,
            notes='Initial top-up',
        )
    return _fund


@pytest.fixture
def user_client(user):
    """Return an API client authenticated as the regular user."""
    return _client_for(user)


@pytest.fixture
def other_user_client(other_user):
    return _client_for(other_user)


@pytest.fixture
def accountant_client(accountant):
    """Return an API client authenticated as the accountant."""
    return _client_for(accountant)


@pytest.fixture
def other_accountant_client(other_accountant):
    return _client_for(other_accountant)


@pytest.fixture
def admin_client(admin_user):
    """Return an API client authenticated as the administrator."""
    return _client_for(admin_user)


@pytest.fixture
def make_invoice(company):
    """Insert an invoice row directly, without touching the ledger."""
    counter = {'n': 0}

    def _make(owner, **fields):
        counter['n'] += 1
        fields.setdefault('company', company)
        fields.setdefault('invoice_number', f"FV/{counter['n']}/2026")
        fields.setdefault('image_key', f"invoices/{owner.id}/scan-{counter['n']}.jpg")
        fields.setdefault('justification', 'Client dinner with the board')
        return Invoice.objects.create(user=owner, **fields)
    return _make
