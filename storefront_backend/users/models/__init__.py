# users/models/__init__.py

from .user import (
    NO_NAME,
    PAYMENT_METHOD_COD,
    PAYMENT_METHOD_PAYPAL,
    PAYMENT_METHOD_STRIPE,
    PAYMENT_METHODS,
    ROLE_ADMIN,
    ROLE_USER,
    User,
    UserManager,
)

__all__ = [
    "User",
    "UserManager",
    "NO_NAME",
    "ROLE_ADMIN",
    "ROLE_USER",
    "PAYMENT_METHODS",
    "PAYMENT_METHOD_PAYPAL",
    "PAYMENT_METHOD_STRIPE",
    "PAYMENT_METHOD_COD",
]
