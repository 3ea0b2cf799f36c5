"""Login and password re-verification."""

import logging

from django.contrib.auth import get_user_model
from django.utils import timezone

from .exceptions import InvalidCredentialsError, InactiveAccountError, InvalidPasswordError

logger = logging.getLogger(__name__)

User = get_user_model()


def authenticate_user(*, email: str, password: str) -> User:
    """
    Check email and password and stamp ``last_login``.

    Unknown email and wrong password raise the same error.

    Raises:
        InvalidCredentialsError: unknown email or wrong password
        InactiveAccountError: account is deactivated
    """
    user = User.objects.filter(email__iexact=email.strip()).first()
    if user is None or not user.check_password(password):
        logger.warning("Failed login for %s", email)
        raise InvalidCredentialsError("Invalid email or password")

    if not user.is_active:
        logger.warning("Login attempt on deactivated account %s", user.id)
        raise InactiveAccountError("Account is deactivated")

    user.last_login = timezone.now()
    User.objects.filter(id=user.id).update(last_login=user.last_login)
    return user


def verify_password(*, user: User, password: str) -> None:
    """
    Re-check the password of an already authenticated principal.

    Destructive admin operations call this before touching any row.

    Raises:
        InvalidPasswordError: If the password does not match
    """
    if not password or not user.check_password(password):
        logger.warning("Password re-verification failed for user %s", user.id)
        raise InvalidPasswordError("Invalid password")
