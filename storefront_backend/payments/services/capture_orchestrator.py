"""
======================================================
PATH: payments/services/capture_orchestrator.py
======================================================
PAYMENT CAPTURE ORCHESTRATOR (APPLICATION SERVICE)

State per order:
    UNPAID --(capture success | COD confirm)--> PAID

Flow:
1) create_provider_order: provider creates a remote order for
   order.total_price; its id is stored in payment_result as a
   PENDING marker (not proof of payment).
2) approve_provider_order: provider capture is re-validated
   (id matches the pending id, status COMPLETED, non-empty) before
   the order is marked paid.
3) mark_order_paid: ONE transaction locks the order, refuses a second
   confirmation (AlreadyPaid), decrements stock, then flips is_paid.

Idempotency:
- Retried captures and duplicate webhooks hit AlreadyPaid under the
  order row lock, so stock is decremented exactly once.
- Provider calls happen OUTSIDE the transaction; a failed call leaves
  the order exactly as it was.
- A verified capture that cannot be fulfilled (stock shortfall) is
  still recorded in payment_result. A later approve re-uses it instead
  of capturing again.
"""

from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone

from common.boundary import action_boundary
from common.exceptions import (
    AlreadyPaid,
    InvalidInput,
    OrderNotFound,
    OutOfStock,
    PaymentVerificationFailed,
)
from common.money import from_minor_units
from common.results import ActionResult, ok
from orders.models import Order
from orders.services.order_lifecycle import validate_transition
from payments.gateways import CAPTURE_COMPLETED, get_gateway
from products.services.inventory import decrement_stock_for_order
from users.models import PAYMENT_METHOD_COD, PAYMENT_METHOD_STRIPE

logger = logging.getLogger(__name__)

STRIPE_PAYMENT_SUCCEEDED = "payment_intent.succeeded"


def _get_order(order_id) -> Order:
    order = Order.objects.filter(pk=order_id).first()
    if order is None:
        raise OrderNotFound()
    return order


def _pending_payment_result(provider_order_id: str) -> dict:
    return {"id": provider_order_id, "status": "", "email_address": "", "pricePaid": "0"}


def _record_capture(order_id, payment_result: dict) -> None:
    """Keep evidence of collected money on an order that could not be marked paid."""
    with transaction.atomic():
        order = Order.objects.select_for_update().filter(pk=order_id).first()
        if order is None or order.is_paid:
            return
        order.payment_result = payment_result
        order.save(update_fields=["payment_result"])

    logger.error(
        "Payment captured but order not fulfilled",
        extra={"order_id": str(order_id), "provider_reference": payment_result.get("id")},
    )


def _mark_captured_order_paid(order_id, payment_result: dict) -> None:
    try:
        mark_order_paid(order_id, payment_result)
    except OutOfStock:
        _record_capture(order_id, payment_result)
        raise


# =====================================================
# PAID TRANSITION (SINGLE WRITER)
# =====================================================
def mark_order_paid(order_id, payment_result: dict | None = None) -> Order:
    """
    Flip an order to paid.

    Raises OrderNotFound, AlreadyPaid, OutOfStock. On any error
    nothing is committed (stock and paid flags move together).
    """
    with transaction.atomic():
        order = Order.objects.select_for_update().filter(pk=order_id).first()
        if order is None:
            raise OrderNotFound()

        try:
            validate_transition(order=order, target_status=Order.STATUS_PAID)
        except AlreadyPaid:
            logger.warning(
                "Duplicate payment confirmation ignored",
                extra={"order_id": str(order.pk), "paid_at": str(order.paid_at)},
            )
            raise

        decrement_stock_for_order(order=order)

        order.is_paid = True
        order.paid_at = timezone.now()
        fields = ["is_paid", "paid_at"]
        if payment_result is not None:
            order.payment_result = payment_result
            fields.append("payment_result")
        order.save(update_fields=fields)

    logger.info(
        "Order paid",
        extra={
            "order_id": str(order.pk),
            "payment_method": order.payment_method,
            "provider_reference": (payment_result or {}).get("id"),
        },
    )
    return order


@action_boundary
def update_order_to_paid(order_id, payment_result: dict | None = None) -> ActionResult:
    mark_order_paid(order_id, payment_result)
    return ok("Order paid successfully")


@action_boundary
def update_order_to_paid_cod(order_id) -> ActionResult:
    """Admin confirmation of a cash-on-delivery payment."""
    mark_order_paid(order_id)
    return ok("Order marked as paid")


# =====================================================
# PROVIDER FLOW
# =====================================================
@action_boundary
def create_provider_order(order_id) -> ActionResult:
    order = _get_order(order_id)

    if order.is_paid:
        raise AlreadyPaid()
    if order.payment_method == PAYMENT_METHOD_COD:
        raise InvalidInput("Cash on delivery orders are confirmed by an admin")

    gateway = get_gateway(order.payment_method)
    remote = gateway.create_remote_order(amount=order.total_price, order_id=str(order.pk))

    with transaction.atomic():
        order = Order.objects.select_for_update().get(pk=order.pk)
        if order.is_paid:
            raise AlreadyPaid()
        order.payment_result = _pending_payment_result(remote.id)
        order.save(update_fields=["payment_result"])

    logger.info(
        "Provider order created",
        extra={
            "order_id": str(order.pk),
            "provider": gateway.provider,
            "provider_reference": remote.id,
        },
    )

    data = {"providerOrderId": remote.id}
    if remote.client_secret:
        data["clientSecret"] = remote.client_secret
    return ok("Item order created successfully", data)


@action_boundary
def approve_provider_order(order_id, provider_order_id: str) -> ActionResult:
    order = _get_order(order_id)

    if order.is_paid:
        raise AlreadyPaid()

    pending_id = order.pending_provider_order_id
    if not pending_id or str(provider_order_id) != pending_id:
        raise PaymentVerificationFailed("Error in payment: unknown provider order")

    recorded = order.payment_result or {}
    if recorded.get("status") == CAPTURE_COMPLETED:
        logger.info(
            "Re-using recorded capture",
            extra={"order_id": str(order.pk), "provider_reference": pending_id},
        )
        _mark_captured_order_paid(order.pk, recorded)
        return ok("Your order has been paid")

    gateway = get_gateway(order.payment_method)
    capture = gateway.capture_remote_payment(pending_id)

    if capture is None or capture.is_empty:
        raise PaymentVerificationFailed("Error in payment: empty capture response")

    if capture.id != pending_id or capture.status != CAPTURE_COMPLETED:
        logger.warning(
            "Payment capture rejected",
            extra={
                "order_id": str(order.pk),
                "provider_reference": capture.id,
                "expected_reference": pending_id,
                "capture_status": capture.status,
            },
        )
        raise PaymentVerificationFailed("Error in payment")

    _mark_captured_order_paid(order.pk, capture.as_payment_result())
    return ok("Your order has been paid")


# =====================================================
# STRIPE WEBHOOK
# =====================================================
@action_boundary
def handle_stripe_webhook(payload: bytes, signature: str | None) -> ActionResult:
    """
    Signed Stripe delivery. Duplicate deliveries are acknowledged.
    """
    event = get_gateway(PAYMENT_METHOD_STRIPE).parse_webhook_event(payload, signature)

    event_type = str(event.get("type") or "")
    if event_type != STRIPE_PAYMENT_SUCCEEDED:
        logger.info("Stripe event ignored", extra={"event_type": event_type})
        return ok("Event ignored")

    intent = (event.get("data") or {}).get("object") or {}
    order_id = str((intent.get("metadata") or {}).get("orderId") or "")
    if not order_id:
        raise PaymentVerificationFailed("Webhook event has no orderId")

    order = _get_order(order_id)
    pending_id = order.pending_provider_order_id
    if pending_id and pending_id != str(intent.get("id") or ""):
        raise PaymentVerificationFailed("Webhook payment intent does not match order")

    payment_result = {
        "id": str(intent.get("id") or ""),
        "status": CAPTURE_COMPLETED,
        "email_address": str(intent.get("receipt_email") or ""),
        "pricePaid": from_minor_units(intent.get("amount_received") or intent.get("amount") or 0),
    }

    try:
        _mark_captured_order_paid(order.pk, payment_result)
    except AlreadyPaid:
        return ok("Order already paid")

    return ok("Order paid successfully")
