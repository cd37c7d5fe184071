# payments/gateways/paypal_adapter.py

"""
PAYPAL ORDERS v2 ADAPTER

- OAuth2 client-credentials token
- POST /v2/checkout/orders            (intent CAPTURE)
- POST /v2/checkout/orders/{id}/capture
- GET  /v2/checkout/orders/{id}     (when the capture already happened)

Every call has a bounded timeout.
Failures are split into:
- RetryableProviderError: timeout, connection error, 5xx, 429
- ProviderRejectedError: any other non-2xx (definitive)
"""

from __future__ import annotations

import base64
import json
import logging
import socket
from decimal import Decimal
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from common.exceptions import PaymentVerificationFailed, ProviderRejectedError, RetryableProviderError
from common.money import money_str
from payments.gateways.config import provider_cfg, provider_timeout, require
from payments.gateways.port import CaptureResult, PaymentGateway, RemoteOrder

logger = logging.getLogger(__name__)

PROVIDER = "PAYPAL"
SANDBOX_API_URL = "https://api-m.sandbox.paypal.com"
DEFAULT_CURRENCY = "USD"
ISSUE_ALREADY_CAPTURED = "ORDER_ALREADY_CAPTURED"


class OrderAlreadyCaptured(ProviderRejectedError):
    """PayPal refused a capture because the order was captured before."""


def _safe_preview(text: str, limit: int = 800) -> str:
    text = (text or "").strip()
    if len(text) <= limit:
        return text
    return text[:limit] + " ...(truncated)"


def _is_retryable_status(code: int) -> bool:
    return code >= 500 or code == 429


def _error_issues(raw: str) -> set[str]:
    try:
        body = json.loads(raw or "{}")
    except ValueError:
        return set()
    details = body.get("details") if isinstance(body, dict) else None
    return {str(d.get("issue")) for d in details or [] if isinstance(d, dict)}


class PayPalGateway(PaymentGateway):
    provider = "paypal"

    def __init__(self, *, client_id: str, app_secret: str, api_url: str = SANDBOX_API_URL,
                 currency: str = DEFAULT_CURRENCY, timeout: float = 15):
        self.client_id = client_id
        self.app_secret = app_secret
        self.api_url = (api_url or SANDBOX_API_URL).rstrip("/")
        self.currency = currency or DEFAULT_CURRENCY
        self.timeout = timeout

    @classmethod
    def from_settings(cls) -> "PayPalGateway":
        cfg = provider_cfg(PROVIDER)
        return cls(
            client_id=require(cfg, "CLIENT_ID", provider=PROVIDER),
            app_secret=require(cfg, "APP_SECRET", provider=PROVIDER),
            api_url=cfg.get("API_URL") or SANDBOX_API_URL,
            currency=cfg.get("CURRENCY") or DEFAULT_CURRENCY,
            timeout=provider_timeout(),
        )

    # ---------------------------------------------------------
    # HTTP
    # ---------------------------------------------------------
    def _send(self, req: Request) -> dict[str, Any]:
        try:
            with urlopen(req, timeout=self.timeout) as resp:
                raw = resp.read().decode("utf-8", errors="replace")
        except HTTPError as e:
            try:
                raw = e.read().decode("utf-8", errors="replace")
            except OSError:
                raw = ""
            logger.warning(
                "PayPal rejected request",
                extra={"status": e.code, "url": req.full_url, "body": _safe_preview(raw)},
            )
            if e.code == 422 and ISSUE_ALREADY_CAPTURED in _error_issues(raw):
                raise OrderAlreadyCaptured(
                    "PayPal order already captured", provider=self.provider, status=e.code
                ) from e
            error_cls = RetryableProviderError if _is_retryable_status(e.code) else ProviderRejectedError
            raise error_cls(f"PayPal HTTPError: {e.code}", provider=self.provider, status=e.code) from e
        except (URLError, socket.timeout, TimeoutError) as e:
            logger.warning("PayPal unreachable", extra={"url": req.full_url, "error": str(e)})
            raise RetryableProviderError(f"PayPal request failed: {e}", provider=self.provider) from e

        try:
            parsed = json.loads(raw or "{}")
        except ValueError as e:
            logger.warning("PayPal returned non-JSON", extra={"body": _safe_preview(raw)})
            raise ProviderRejectedError("PayPal returned non-JSON", provider=self.provider) from e

        if not isinstance(parsed, dict):
            raise ProviderRejectedError("PayPal returned an unexpected payload", provider=self.provider)
        return parsed

    def _access_token(self) -> str:
        auth = base64.b64encode(f"{self.client_id}:{self.app_secret}".encode("utf-8")).decode("ascii")
        req = Request(
            f"{self.api_url}/v1/oauth2/token",
            data=b"grant_type=client_credentials",
            headers={
                "Authorization": f"Basic {auth}",
                "Content-Type": "application/x-www-form-urlencoded",
                "Accept": "application/json",
            },
            method="POST",
        )
        token = str(self._send(req).get("access_token") or "")
        if not token:
            raise ProviderRejectedError("PayPal returned no access token", provider=self.provider)
        return token

    def _call(self, method: str, path: str, body: dict | None = None) -> dict[str, Any]:
        token = self._access_token()
        req = Request(
            f"{self.api_url}{path}",
            data=json.dumps(body or {}).encode("utf-8") if method == "POST" else None,
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            method=method,
        )
        return self._send(req)

    def _post_json(self, path: str, body: dict | None = None) -> dict[str, Any]:
        return self._call("POST", path, body)

    def _get_json(self, path: str) -> dict[str, Any]:
        return self._call("GET", path)

    # ---------------------------------------------------------
    # PORT
    # ---------------------------------------------------------
    def create_remote_order(self, *, amount: Decimal, order_id: str) -> RemoteOrder:
        payload = {
            "intent": "CAPTURE",
            "purchase_units": [
                {
                    "reference_id": str(order_id),
                    "amount": {"currency_code": self.currency, "value": money_str(amount)},
                }
            ],
        }
        data = self._post_json("/v2/checkout/orders", payload)

        remote_id = str(data.get("id") or "")
        if not remote_id:
            raise ProviderRejectedError("PayPal order has no id", provider=self.provider)
        return RemoteOrder(id=remote_id)

    def capture_remote_payment(self, provider_order_id: str) -> CaptureResult:
        try:
            data = self._post_json(f"/v2/checkout/orders/{provider_order_id}/capture")
        except OrderAlreadyCaptured:
            # an earlier capture succeeded but its response never reached us
            logger.info(
                "PayPal order already captured, looking it up",
                extra={"provider_order_id": provider_order_id},
            )
            data = self._get_json(f"/v2/checkout/orders/{provider_order_id}")

        if not data:
            return CaptureResult(id="", status="")

        payer = data.get("payer") or {}
        amount = "0.00"
        try:
            capture = data["purchase_units"][0]["payments"]["captures"][0]
            amount = str(capture["amount"]["value"])
        except (KeyError, IndexError, TypeError):
            logger.info("PayPal capture without amount", extra={"provider_order_id": provider_order_id})

        return CaptureResult(
            id=str(data.get("id") or ""),
            status=str(data.get("status") or ""),
            email_address=str(payer.get("email_address") or ""),
            amount=amount,
            raw=data,
        )

    def parse_webhook_event(self, payload: bytes, signature: str | None) -> dict:
        raise PaymentVerificationFailed("PayPal webhooks are not accepted")
