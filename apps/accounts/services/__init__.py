"""
Accounts services.

Self-registration, login, password re-verification for destructive admin
actions, and the admin-managed user directory.
"""

from .exceptions import (
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    InvalidPasswordError,
    UserNotFoundError,
    WeakPasswordError,
    SelfModificationError,
    PasswordChangedConcurrentlyError,
)
from .user_registration import register_user
from .user_authentication import authenticate_user, verify_password
from .user_management import (
    list_users,
    create_user_account,
    update_user_account,
    reset_user_password,
    change_password,
)

__all__ = [
    # Exceptions
    'UserRegistrationError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'InvalidPasswordError',
    'UserNotFoundError',
    'WeakPasswordError',
    'SelfModificationError',
    'PasswordChangedConcurrentlyError',

    # Authentication
    'register_user',
    'authenticate_user',
    'verify_password',

    # User directory
    'list_users',
    'create_user_account',
    'update_user_account',
    'reset_user_password',
    'change_password',
]
