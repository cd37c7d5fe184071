# backend/settings/test.py
"""
PATH: backend/settings/test.py

TEST SETTINGS
- in-memory sqlite
- fast password hashing
- fake payment gateway (no network)
- throttling effectively off
"""

from __future__ import annotations

from .base import *  # noqa: F403
from .base import LOGGING, PAYMENTS, REST_FRAMEWORK

DEBUG = False

SECRET_KEY = "test-secret-key-not-for-production-use-0123456789"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

PAYMENTS = {
    **PAYMENTS,
    "GATEWAY_BACKEND": "fake",
    "STRIPE": {**PAYMENTS["STRIPE"], "WEBHOOK_SECRET": "whsec_test"},
}

CART_SIGN_IN_POLICY = "override"

REST_FRAMEWORK = {
    **REST_FRAMEWORK,
    "DEFAULT_THROTTLE_RATES": {
        scope: "10000/min" for scope in REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"]
    },
}

LOGGING["root"]["level"] = "CRITICAL"
for _logger in LOGGING["loggers"].values():
    _logger["level"] = "CRITICAL"
