# payments/gateways/stripe_adapter.py

"""
STRIPE PAYMENT INTENTS ADAPTER

- create_remote_order -> PaymentIntent (amount in cents, metadata.orderId)
- capture_remote_payment -> retrieve the PaymentIntent; "succeeded" is
  normalized to COMPLETED so the orchestrator checks one status vocabulary
- parse_webhook_event -> stripe.Webhook.construct_event (signed)
"""

from __future__ import annotations

import logging
from decimal import Decimal

import stripe

from common.exceptions import (
    PaymentVerificationFailed,
    ProviderRejectedError,
    RetryableProviderError,
)
from common.money import from_minor_units, to_minor_units
from payments.gateways.config import provider_cfg, provider_timeout, require
from payments.gateways.port import CAPTURE_COMPLETED, CaptureResult, PaymentGateway, RemoteOrder

logger = logging.getLogger(__name__)

PROVIDER = "STRIPE"
DEFAULT_CURRENCY = "cad"

STATUS_MAP = {
    "succeeded": CAPTURE_COMPLETED,
}

RETRYABLE_ERRORS = (
    stripe.APIConnectionError,
    stripe.RateLimitError,
    stripe.APIError,
)


class StripeGateway(PaymentGateway):
    provider = "stripe"

    def __init__(self, *, secret_key: str, webhook_secret: str = "", currency: str = DEFAULT_CURRENCY,
                 timeout: float = 15, client: stripe.StripeClient | None = None):
        self.webhook_secret = webhook_secret
        self.currency = (currency or DEFAULT_CURRENCY).lower()
        self.client = client or stripe.StripeClient(
            secret_key,
            http_client=stripe.RequestsClient(timeout=timeout),
            max_network_retries=0,
        )

    @classmethod
    def from_settings(cls) -> "StripeGateway":
        cfg = provider_cfg(PROVIDER)
        return cls(
            secret_key=require(cfg, "SECRET_KEY", provider=PROVIDER),
            webhook_secret=str(cfg.get("WEBHOOK_SECRET") or ""),
            currency=cfg.get("CURRENCY") or DEFAULT_CURRENCY,
            timeout=provider_timeout(),
        )

    def _call(self, fn, *args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except RETRYABLE_ERRORS as e:
            logger.warning("Stripe unavailable", extra={"error": str(e)})
            raise RetryableProviderError(
                f"Stripe request failed: {e}",
                provider=self.provider,
                status=getattr(e, "http_status", None),
            ) from e
        except stripe.StripeError as e:
            logger.warning("Stripe rejected request", extra={"error": str(e)})
            raise ProviderRejectedError(
                f"Stripe rejected request: {e}",
                provider=self.provider,
                status=getattr(e, "http_status", None),
            ) from e

    def create_remote_order(self, *, amount: Decimal, order_id: str) -> RemoteOrder:
        intent = self._call(
            self.client.payment_intents.create,
            params={
                "amount": to_minor_units(amount),
                "currency": self.currency,
                "metadata": {"orderId": str(order_id)},
            },
        )
        return RemoteOrder(id=intent.id, client_secret=intent.client_secret)

    def capture_remote_payment(self, provider_order_id: str) -> CaptureResult:
        intent = self._call(self.client.payment_intents.retrieve, provider_order_id)
        data = intent.to_dict() if intent is not None else {}
        if not data:
            return CaptureResult(id="", status="")

        status = str(data.get("status") or "")
        return CaptureResult(
            id=str(data.get("id") or ""),
            status=STATUS_MAP.get(status, status.upper()),
            email_address=str(data.get("receipt_email") or ""),
            amount=from_minor_units(data.get("amount_received") or 0),
            raw=data,
        )

    def parse_webhook_event(self, payload: bytes, signature: str | None) -> dict:
        if not self.webhook_secret:
            raise PaymentVerificationFailed("Stripe webhook secret is not configured")
        try:
            event = stripe.Webhook.construct_event(payload, signature or "", self.webhook_secret)
        except (ValueError, stripe.SignatureVerificationError) as e:
            logger.warning("Invalid Stripe webhook", extra={"error": str(e)})
            raise PaymentVerificationFailed("Invalid webhook signature") from e
        return event.to_dict()
