"""
User directory and password management.

Admins provision accounts and assign roles; every principal can change its
own password. Accounts are deactivated rather than deleted because ledger
rows reference them.
"""

import logging
from typing import List, Optional
from uuid import UUID

from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.db.models import Q
from django.utils import timezone

from apps.accounts.models import UserRole

from .exceptions import (
    UserRegistrationError,
    UserNotFoundError,
    InvalidPasswordError,
    WeakPasswordError,
    SelfModificationError,
    PasswordChangedConcurrentlyError,
)
from .user_authentication import verify_password

logger = logging.getLogger(__name__)

User = get_user_model()


def _check_strength(password: str, user=None) -> None:
    try:
        validate_password(password, user=user)
    except DjangoValidationError as exc:
        raise WeakPasswordError(' '.join(exc.messages))


def _get_user(user_id: UUID) -> User:
    try:
        return User.objects.get(id=user_id)
    except User.DoesNotExist:
        raise UserNotFoundError(f"User {user_id} not found")


def list_users(*, role: Optional[str] = None, search: str = '', include_inactive: bool = False) -> List[User]:
    """Newest accounts first."""
    users = User.objects.order_by('-created_at')
    if not include_inactive:
        users = users.filter(is_active=True)
    if role:
        users = users.filter(role=role)
    if search:
        users = users.filter(Q(email__icontains=search) | Q(name__icontains=search))
    return list(users)


def create_user_account(*, admin: User, email: str, password: str, name: str, role: str) -> User:
    """
    Provision an account with any role.

    Raises:
        UserRegistrationError: email taken or unknown role
        WeakPasswordError: password rejected by the validators
    """
    if role not in UserRole.values:
        raise UserRegistrationError(f"Unknown role: {role}")
    _check_strength(password)

    email = User.objects.normalize_email(email)
    if User.objects.filter(email__iexact=email).exists():
        raise UserRegistrationError("A user with this email already exists")

    try:
        with transaction.atomic():
            user = User.objects.create_user(email=email, password=password, name=name.strip(), role=role)
    except IntegrityError:
        raise UserRegistrationError("A user with this email already exists")

    logger.info("Admin %s created %s account %s", admin.id, role, user.id)
    return user


def update_user_account(
    *,
    admin: User,
    user_id: UUID,
    name: Optional[str] = None,
    role: Optional[str] = None,
    is_active: Optional[bool] = None,
) -> User:
    """
    Rename, re-role or (de)activate an account.

    Raises:
        UserNotFoundError: user doesn't exist
        UserRegistrationError: unknown role
        SelfModificationError: admin demoting or deactivating itself
    """
    target = _get_user(user_id)

    changes = {}
    if name is not None:
        changes['name'] = name.strip()
    if role is not None:
        if role not in UserRole.values:
            raise UserRegistrationError(f"Unknown role: {role}")
        if target.id == admin.id and role != UserRole.ADMIN:
            raise SelfModificationError("You cannot remove your own administrator role")
        changes['role'] = role
    if is_active is not None:
        if target.id == admin.id and not is_active:
            raise SelfModificationError("You cannot deactivate your own account")
        changes['is_active'] = is_active

    if changes:
        User.objects.filter(id=target.id).update(updated_at=timezone.now(), **changes)
        logger.info("Admin %s updated user %s (%s)", admin.id, target.id, ', '.join(changes))
    return _get_user(target.id)


@transaction.atomic
def reset_user_password(*, admin: User, admin_password: str, user_id: UUID, new_password: str) -> None:
    """
    Set another user's password after re-verifying the admin.

    Raises:
        InvalidPasswordError: admin password re-verification failed
        UserNotFoundError: user doesn't exist
        WeakPasswordError: password rejected by the validators
    """
    verify_password(user=admin, password=admin_password)

    try:
        target = User.objects.select_for_update().get(id=user_id)
    except User.DoesNotExist:
        raise UserNotFoundError(f"User {user_id} not found")

    _check_strength(new_password, user=target)
    target.set_password(new_password)
    target.save(update_fields=['password', 'updated_at'])
    logger.info("Admin %s reset the password of user %s", admin.id, target.id)


def change_password(*, user: User, current_password: str, new_password: str) -> None:
    """
    Change one's own password.

    The write is guarded on ``updated_at`` so that two sessions changing the
    password at once cannot both win.

    Raises:
        InvalidPasswordError: current password is wrong
        WeakPasswordError: password rejected by the validators
        PasswordChangedConcurrentlyError: account changed since it was loaded
    """
    if not current_password or not user.check_password(current_password):
        raise InvalidPasswordError("Current password is incorrect")
    _check_strength(new_password, user=user)

    expected_updated_at = user.updated_at
    user.set_password(new_password)
    updated = User.objects.filter(
        id=user.id,
        updated_at=expected_updated_at,
    ).update(password=user.password, updated_at=timezone.now())
    if not updated:
        raise PasswordChangedConcurrentlyError()

    logger.info("User %s changed their password", user.id)
