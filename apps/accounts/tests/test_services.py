import pytest
from uuid import uuid4
from unittest.mock import patch

from apps.accounts.models import User, UserRole
from apps.accounts.services import (
    list_users,
    create_user_account,
    update_user_account,
    reset_user_password,
    change_password,
)
from apps.accounts.services.exceptions import (
    UserRegistrationError,
    UserNotFoundError,
    InvalidPasswordError,
    WeakPasswordError,
    SelfModificationError,
    PasswordChangedConcurrentlyError,
)


# =============================================================================
# User directory
# =============================================================================

@pytest.mark.django_db
class TestUserDirectory:

    def test_list_filters(self, user, accountant, admin_user):
        assert set(list_users()) == {user, accountant, admin_user}
        assert list_users(role=UserRole.ACCOUNTANT) == [accountant]
        assert list_users(search='testuser') == [user]

    def test_list_hides_inactive(self, user, admin_user):
        User.objects.filter(id=user.id).update(is_active=False)

        assert list_users() == [admin_user]
        assert user in list_users(include_inactive=True)

    def test_create_with_role(self, admin_user):
        created = create_user_account(
            admin=admin_user,
            email='Ksiegowa@Example.com',
            password='Str0ngPassw0rd!',
            name=' Anna Nowak ',
            role=UserRole.ACCOUNTANT,
        )

        assert created.role == UserRole.ACCOUNTANT
        assert created.name == 'Anna Nowak'
        assert created.check_password('Str0ngPassw0rd!')

    def test_create_duplicate_email(self, admin_user, user):
        with pytest.raises(UserRegistrationError):
            create_user_account(
                admin=admin_user,
                email=user.email.upper(),
                password='Str0ngPassw0rd!',
                name='Copy',
                role=UserRole.USER,
            )

    def test_create_weak_password(self, admin_user):
        with pytest.raises(WeakPasswordError):
            create_user_account(
                admin=admin_user, email='weak@example.com', password='123', name='Weak', role=UserRole.USER,
            )

    def test_promote(self, admin_user, user):
        updated = update_user_account(admin=admin_user, user_id=user.id, role=UserRole.ACCOUNTANT)

        assert updated.role == UserRole.ACCOUNTANT

    def test_admin_cannot_demote_itself(self, admin_user):
        with pytest.raises(SelfModificationError):
            update_user_account(admin=admin_user, user_id=admin_user.id, role=UserRole.USER)

    def test_admin_cannot_deactivate_itself(self, admin_user):
        with pytest.raises(SelfModificationError):
            update_user_account(admin=admin_user, user_id=admin_user.id, is_active=False)

    def test_update_unknown_user(self, admin_user):
        with pytest.raises(UserNotFoundError):
            update_user_account(admin=admin_user, user_id=uuid4(), name='Ghost')


# =============================================================================
# Passwords
# =============================================================================

@pytest.mark.django_db
class TestPasswords:

    def test_reset_requires_admin_password(self, admin_user, user):
        with pytest.raises(InvalidPasswordError):
            reset_user_password(
                admin=admin_user, admin_password='wrong', user_id=user.id, new_password='N3wPassword!x',
            )

    def test_reset(self, admin_user, user, password):
        reset_user_password(
            admin=admin_user, admin_password=password, user_id=user.id, new_password='N3wPassword!x',
        )

        user.refresh_from_db()
        assert user.check_password('N3wPassword!x')

    def test_change_own_password(self, user, password):
        change_password(user=user, current_password=password, new_password='N3wPassword!x')

        user.refresh_from_db()
        assert user.check_password('N3wPassword!x')

    def test_change_with_wrong_current_password(self, user):
        with pytest.raises(InvalidPasswordError):
            change_password(user=user, current_password='WrongPass123!', new_password='N3wPassword!x')

    def test_change_rejects_weak_password(self, user, password):
        with pytest.raises(WeakPasswordError):
            change_password(user=user, current_password=password, new_password='abc')

    def test_concurrent_change_conflicts(self, user, password):
        stale = User.objects.get(id=user.id)
        change_password(user=user, current_password=password, new_password='N3wPassword!x')

        with patch.object(stale, 'check_password', return_value=True):
            with pytest.raises(PasswordChangedConcurrentlyError):
                change_password(user=stale, current_password=password, new_password='Other3Password!')
