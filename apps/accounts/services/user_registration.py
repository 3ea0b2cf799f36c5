"""Self-registration."""

import logging

from django.contrib.auth import get_user_model
from django.db import transaction, IntegrityError

from apps.accounts.models import UserRole

from .exceptions import UserRegistrationError

logger = logging.getLogger(__name__)

User = get_user_model()


def register_user(*, email: str, password: str, name: str = '') -> User:
    """
    Create a regular ``user`` account.

    Accountants and admins are provisioned through the user directory.

    Raises:
        UserRegistrationError: email already taken
    """
    email = User.objects.normalize_email(email)
    if User.objects.filter(email__iexact=email).exists():
        raise UserRegistrationError("A user with this email already exists")

    try:
        with transaction.atomic():
            user = User.objects.create_user(
                email=email,
                password=password,
                name=name.strip(),
                role=UserRole.USER,
            )
    except IntegrityError:
        raise UserRegistrationError("A user with this email already exists")

    logger.info("Registered user %s", user.id)
    return user
