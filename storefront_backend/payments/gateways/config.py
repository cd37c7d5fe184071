# payments/gateways/config.py

from __future__ import annotations

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

DEFAULT_TIMEOUT = 15


def payments_cfg() -> dict:
    payments = getattr(settings, "PAYMENTS", {}) or {}
    return payments if isinstance(payments, dict) else {}


def provider_cfg(name: str) -> dict:
    cfg = payments_cfg().get(name) or {}
    return cfg if isinstance(cfg, dict) else {}


def provider_timeout() -> float:
    return float(payments_cfg().get("TIMEOUT") or DEFAULT_TIMEOUT)


def gateway_backend() -> str:
    return str(payments_cfg().get("GATEWAY_BACKEND") or "live").strip().lower()


def require(cfg: dict, key: str, *, provider: str) -> str:
    value = str(cfg.get(key) or "").strip()
    if not value:
        raise ImproperlyConfigured(
            f"{provider} {key} is not configured. Expected settings.PAYMENTS['{provider}']['{key}']."
        )
    return value
