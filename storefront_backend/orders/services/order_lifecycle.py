"""
ORDER LIFECYCLE DOMAIN RULES

The ONLY allowed lifecycle transitions for an Order:

    UNPAID --capture / COD confirm--> PAID --deliver--> DELIVERED

Nothing moves an order back. The rule functions perform no
database writes; deliver_order() is the single delivery writer.
"""

from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone

from common.boundary import action_boundary
from common.exceptions import (
    AlreadyPaid,
    InvalidOrderTransition,
    NotYetPaid,
    OrderNotFound,
)
from common.results import ActionResult, ok
from orders.models import Order

logger = logging.getLogger(__name__)

# ============================================================
# STATE DEFINITIONS
# ============================================================

TERMINAL_STATES = {
    Order.STATUS_DELIVERED,
}

ALLOWED_TRANSITIONS = {
    Order.STATUS_UNPAID: {
        Order.STATUS_PAID,
    },
    Order.STATUS_PAID: {
        Order.STATUS_DELIVERED,
    },
}


# ============================================================
# DOMAIN RULES
# ============================================================


def can_transition(*, from_status: str, to_status: str) -> bool:
    if from_status in TERMINAL_STATES:
        return False

    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def validate_transition(*, order: Order, target_status: str):
    current = order.status
    if can_transition(from_status=current, to_status=target_status):
        return

    if target_status == Order.STATUS_PAID and order.is_paid:
        raise AlreadyPaid()

    if target_status == Order.STATUS_DELIVERED and not order.is_paid:
        raise NotYetPaid()

    raise InvalidOrderTransition(
        f"Order {order.id} cannot transition from '{current}' to '{target_status}'"
    )


# ============================================================
# DELIVERY
# ============================================================


@action_boundary
def deliver_order(order_id) -> ActionResult:
    with transaction.atomic():
        order = Order.objects.select_for_update().filter(pk=order_id).first()
        if order is None:
            raise OrderNotFound()

        validate_transition(order=order, target_status=Order.STATUS_DELIVERED)

        order.is_delivered = True
        order.delivered_at = timezone.now()
        order.save(update_fields=["is_delivered", "delivered_at"])

    logger.info("Order delivered", extra={"order_id": str(order.pk)})
    return ok("Order has been marked delivered")
