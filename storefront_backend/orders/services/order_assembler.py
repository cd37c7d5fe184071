"""
======================================================
PATH: orders/services/order_assembler.py
======================================================
ORDER ASSEMBLER (APPLICATION SERVICE)

Purpose:
- Turn the actor's cart into an immutable Order + OrderItems.

Preconditions (checked in this order, each a distinct outcome):
1) actor authenticated
2) cart exists and is non-empty        -> redirect /cart
3) saved shipping address              -> redirect /shipping-address
4) saved payment method                -> redirect /payment-method

Hard rules:
- Prices are copied verbatim from the cart. The cart is the pricing
  authority at checkout time; nothing is recomputed here.
- Order insert, line inserts and the cart reset share ONE transaction.
- Stock is NOT touched here (decremented when the order is paid).
"""

from __future__ import annotations

import logging

from django.db import transaction

from cart.models import Cart
from common.actor import Actor
from common.boundary import action_boundary
from common.exceptions import (
    EmptyCart,
    MissingPaymentMethod,
    MissingShippingAddress,
)
from common.money import ZERO_PRICES, round2
from common.results import ActionResult, ok
from orders.models import Order, OrderItem
from users.services.profile import get_user_for_actor

logger = logging.getLogger(__name__)


def _reset_cart(cart: Cart) -> None:
    cart.items = []
    for field, value in ZERO_PRICES.as_model_fields().items():
        setattr(cart, field, value)
    cart.save(
        update_fields=[
            "items",
            "items_price",
            "shipping_price",
            "tax_price",
            "total_price",
            "updated_at",
        ]
    )


def _order_items(order: Order, lines: list[dict]) -> list[OrderItem]:
    return [
        OrderItem(
            order=order,
            product_id=line["productId"],
            name=line["name"],
            slug=line["slug"],
            image=line.get("image") or "",
            price=round2(line["price"]),
            quantity=int(line["quantity"]),
        )
        for line in lines
    ]


@action_boundary
def create_order(actor: Actor) -> ActionResult:
    user = get_user_for_actor(actor)

    with transaction.atomic():
        cart = Cart.objects.select_for_update().filter(user=user).first()
        if cart is None or not cart.items:
            raise EmptyCart()

        if not user.address:
            raise MissingShippingAddress()

        if not user.payment_method:
            raise MissingPaymentMethod()

        order = Order.objects.create(
            user=user,
            shipping_address=dict(user.address),
            payment_method=user.payment_method,
            items_price=cart.items_price,
            shipping_price=cart.shipping_price,
            tax_price=cart.tax_price,
            total_price=cart.total_price,
        )

        OrderItem.objects.bulk_create(_order_items(order, list(cart.items)))

        _reset_cart(cart)

    logger.info(
        "Order created",
        extra={
            "order_id": str(order.pk),
            "user_id": str(user.pk),
            "cart_id": str(cart.pk),
            "total_price": str(order.total_price),
        },
    )
    return ok(
        "Order created",
        {"orderId": str(order.pk)},
        redirect_to=f"/order/{order.pk}",
    )
