"""Payment gateway port.

The two capabilities the capture orchestrator consumes from a provider:
- create a remote order for an amount
- capture (or look up) the payment for a remote order id

Provider responses are untrusted; the orchestrator re-validates them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal

CAPTURE_COMPLETED = "COMPLETED"


@dataclass(frozen=True)
class RemoteOrder:
    """A provider-side order/intent waiting for the buyer."""

    id: str
    client_secret: str | None = None


@dataclass(frozen=True)
class CaptureResult:
    """Normalized capture response."""

    id: str
    status: str
    email_address: str = ""
    amount: str = "0.00"
    raw: dict = field(default_factory=dict, compare=False, repr=False)

    @property
    def is_empty(self) -> bool:
        return not self.id and not self.status

    def as_payment_result(self) -> dict:
        return {
            "id": self.id,
            "status": self.status,
            "email_address": self.email_address,
            "pricePaid": self.amount,
        }


class PaymentGateway(ABC):
    provider = ""

    @abstractmethod
    def create_remote_order(self, *, amount: Decimal, order_id: str) -> RemoteOrder:
        """Create the remote order for `amount`."""
        ...

    @abstractmethod
    def capture_remote_payment(self, provider_order_id: str) -> CaptureResult:
        """Capture (or confirm) the payment for a remote order."""
        ...

    @abstractmethod
    def parse_webhook_event(self, payload: bytes, signature: str | None) -> dict:
        """Verify and decode a provider webhook delivery."""
        ...
