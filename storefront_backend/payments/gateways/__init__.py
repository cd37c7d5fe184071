"""Payment gateway registry.

get_gateway(payment_method) returns the adapter for a payment method:
- "PayPal" -> PayPalGateway
- "Stripe" -> StripeGateway

settings.PAYMENTS["GATEWAY_BACKEND"] == "fake" serves one shared
FakeGateway for every method. set_gateway() overrides one method
(useful for tests); reset_gateways() clears all overrides.
"""

from __future__ import annotations

from common.exceptions import InvalidInput
from payments.gateways.config import gateway_backend
from payments.gateways.fake_adapter import FakeGateway
from payments.gateways.paypal_adapter import PayPalGateway
from payments.gateways.port import CAPTURE_COMPLETED, CaptureResult, PaymentGateway, RemoteOrder
from payments.gateways.stripe_adapter import StripeGateway
from users.models import PAYMENT_METHOD_PAYPAL, PAYMENT_METHOD_STRIPE

LIVE_GATEWAYS = {
    PAYMENT_METHOD_PAYPAL: PayPalGateway.from_settings,
    PAYMENT_METHOD_STRIPE: StripeGateway.from_settings,
}

_overrides: dict[str, PaymentGateway] = {}
_fake: FakeGateway | None = None


def get_gateway(payment_method: str) -> PaymentGateway:
    if payment_method not in LIVE_GATEWAYS:
        raise InvalidInput(f"No payment provider for method {payment_method!r}")

    if payment_method in _overrides:
        return _overrides[payment_method]

    if gateway_backend() == "fake":
        global _fake
        if _fake is None:
            _fake = FakeGateway()
        return _fake

    return LIVE_GATEWAYS[payment_method]()


def set_gateway(payment_method: str, gateway: PaymentGateway) -> None:
    _overrides[payment_method] = gateway


def reset_gateways() -> None:
    global _fake
    _overrides.clear()
    _fake = None


__all__ = [
    "CAPTURE_COMPLETED",
    "CaptureResult",
    "FakeGateway",
    "PayPalGateway",
    "PaymentGateway",
    "RemoteOrder",
    "StripeGateway",
    "get_gateway",
    "reset_gateways",
    "set_gateway",
]
