# products/services/inventory.py

"""
======================================================
PATH: products/services/inventory.py
======================================================
INVENTORY LEDGER

Purpose:
- Decrement Product.stock for every line of a paid order.

Rules:
- Called ONLY from the paid transition (payments.services.capture_orchestrator),
  inside the same transaction that flips Order.is_paid.
- Product rows are locked (select_for_update) in a stable order (pk) to avoid
  deadlocks between concurrent confirmations sharing products.
- The UPDATE is conditional (stock >= quantity): stock never goes negative.
  A shortfall raises OutOfStock and the caller's transaction rolls back.
"""

from __future__ import annotations

import logging
from collections import defaultdict

from django.db import transaction
from django.db.models import F

from common.exceptions import OutOfStock, ProductNotFound
from products.models import Product

logger = logging.getLogger(__name__)


def _quantities_by_product(order_items) -> dict:
    wanted = defaultdict(int)
    for item in order_items:
        qty = int(getattr(item, "quantity", 0) or 0)
        if qty <= 0:
            continue
        wanted[item.product_id] += qty
    return dict(wanted)


def decrement_stock_for_order(*, order) -> dict:
    """
    Apply the stock decrement for one order.
    Returns {product_id: quantity_decremented}.
    """
    if not transaction.get_connection().in_atomic_block:
        raise RuntimeError("decrement_stock_for_order must run inside transaction.atomic()")

    wanted = _quantities_by_product(order.items.all())
    if not wanted:
        return {}

    locked = {
        p.pk: p
        for p in Product.objects.select_for_update().filter(pk__in=wanted.keys()).order_by("pk")
    }

    for product_id, qty in sorted(wanted.items(), key=lambda kv: str(kv[0])):
        product = locked.get(product_id)
        if product is None:
            raise ProductNotFound(f"Product {product_id} no longer exists")

        updated = Product.objects.filter(pk=product_id, stock__gte=qty).update(
            stock=F("stock") - qty
        )
        if updated != 1:
            logger.error(
                "Stock shortfall while confirming payment",
                extra={
                    "order_id": str(order.pk),
                    "product_id": str(product_id),
                    "requested": qty,
                    "available": product.stock,
                },
            )
            raise OutOfStock(
                f"Insufficient stock for {product.name}. "
                f"Available: {product.stock}, Requested: {qty}",
                product_id=product_id,
                requested=qty,
                available=product.stock,
            )

    logger.info(
        "Stock decremented for order",
        extra={"order_id": str(order.pk), "lines": len(wanted)},
    )
    return wanted
