"""Configurable fake payment gateway for development and testing.

No network calls. Tests shape the capture response (status, id,
email, amount) or make any call fail with a chosen exception.
"""

from __future__ import annotations

import json
from decimal import Decimal
from uuid import uuid4

from common.exceptions import PaymentVerificationFailed
from common.money import money_str
from payments.gateways.port import CAPTURE_COMPLETED, CaptureResult, PaymentGateway, RemoteOrder

TEST_SIGNATURE = "test-signature"


class FakeGateway(PaymentGateway):
    provider = "fake"

    def __init__(self) -> None:
        self.capture_status: str = CAPTURE_COMPLETED
        self.capture_id: str | None = None
        self.email_address: str = "buyer@example.com"
        self.amount: str | None = None
        self.empty_capture: bool = False
        self.error: Exception | None = None
        self.calls: list[dict] = []
        self._amounts: dict[str, Decimal] = {}

    def configure(
        self,
        *,
        capture_status: str = CAPTURE_COMPLETED,
        capture_id: str | None = None,
        email_address: str = "buyer@example.com",
        amount: str | None = None,
        empty_capture: bool = False,
        error: Exception | None = None,
    ) -> None:
        self.capture_status = capture_status
        self.capture_id = capture_id
        self.email_address = email_address
        self.amount = amount
        self.empty_capture = empty_capture
        self.error = error

    def create_remote_order(self, *, amount: Decimal, order_id: str) -> RemoteOrder:
        self.calls.append({"method": "create_remote_order", "amount": amount, "order_id": order_id})
        if self.error is not None:
            raise self.error

        remote_id = f"fake_order_{uuid4().hex[:12]}"
        self._amounts[remote_id] = amount
        return RemoteOrder(id=remote_id, client_secret=f"{remote_id}_secret")

    def capture_remote_payment(self, provider_order_id: str) -> CaptureResult:
        self.calls.append({"method": "capture_remote_payment", "provider_order_id": provider_order_id})
        if self.error is not None:
            raise self.error

        if self.empty_capture:
            return CaptureResult(id="", status="")

        amount = self.amount
        if amount is None:
            amount = money_str(self._amounts.get(provider_order_id, Decimal("0")))

        return CaptureResult(
            id=self.capture_id if self.capture_id is not None else provider_order_id,
            status=self.capture_status,
            email_address=self.email_address,
            amount=amount,
        )

    def parse_webhook_event(self, payload: bytes, signature: str | None) -> dict:
        if signature != TEST_SIGNATURE:
            raise PaymentVerificationFailed("Invalid webhook signature")
        return json.loads(payload or b"{}")
