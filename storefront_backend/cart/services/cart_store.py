"""
======================================================
PATH: cart/services/cart_store.py
======================================================
CART STORE

Owns the mutable per-session / per-user cart.

Rules:
- Owner resolution: authenticated user first, else the session cart token.
- Every mutation runs in transaction.atomic() after select_for_update()
  on the cart row, so concurrent add/remove on one cart are serialized.
- Items and the four derived prices are persisted by ONE save().
- Money is server-owned: price/name/slug/image are snapshotted from the
  Product, never trusted from the client payload.
"""

from __future__ import annotations

import logging
import uuid

from django.db import transaction

from cart.models import Cart
from cart.serializers import CartItemInputSerializer, CartSerializer
from common.actor import Actor
from common.boundary import action_boundary
from common.exceptions import CartItemNotFound, CartNotFound, OutOfStock, ProductNotFound
from common.money import calc_price, money_str
from common.results import ActionResult, ok
from products.models import Product

logger = logging.getLogger(__name__)

PRICE_FIELDS = ["items_price", "shipping_price", "tax_price", "total_price"]


# =====================================================
# OWNER RESOLUTION
# =====================================================
def _owner_filter(actor: Actor) -> dict | None:
    if actor.is_authenticated:
        return {"user_id": actor.user_id}
    if actor.session_cart_id:
        return {"session_cart_id": actor.session_cart_id}
    return None


def get_my_cart(actor: Actor) -> Cart | None:
    """
    The actor's cart, or None.

    No cart is a valid empty state, not an error.
    """
    owner = _owner_filter(actor)
    if owner is None:
        return None
    return Cart.objects.filter(**owner).first()


def _new_session_cart_id(actor: Actor) -> str:
    token = actor.session_cart_id
    if token and not Cart.objects.filter(session_cart_id=token).exists():
        return token
    return uuid.uuid4().hex


def _lock_cart(actor: Actor, *, create: bool) -> Cart:
    owner = _owner_filter(actor)
    if owner is None:
        raise CartNotFound("Cart session not found")

    if create:
        cart, created = Cart.objects.get_or_create(
            **owner,
            defaults={"session_cart_id": _new_session_cart_id(actor)}
            if actor.is_authenticated
            else {},
        )
        if created:
            logger.info(
                "Cart created",
                extra={"cart_id": str(cart.pk), "user_id": actor.user_id},
            )

    cart = Cart.objects.select_for_update().filter(**owner).first()
    if cart is None:
        raise CartNotFound()
    return cart


def _save_items(cart: Cart, items: list[dict]) -> None:
    prices = calc_price(items)
    cart.items = items
    for field, value in prices.as_model_fields().items():
        setattr(cart, field, value)
    cart.save(update_fields=["items", *PRICE_FIELDS, "updated_at"])


def _line_from_product(product: Product, quantity: int) -> dict:
    return {
        "productId": str(product.pk),
        "name": product.name,
        "slug": product.slug,
        "image": product.primary_image,
        "price": money_str(product.price),
        "quantity": quantity,
    }


# =====================================================
# MUTATIONS
# =====================================================
@action_boundary
def add_item_to_cart(actor: Actor, data) -> ActionResult:
    """
    Add one unit of a product to the actor's cart.

    - new line: requires stock >= 1
    - existing line: requires stock >= existing quantity + 1
    """
    serializer = CartItemInputSerializer(data=data)
    serializer.is_valid(raise_exception=True)
    product_id = serializer.validated_data["productId"]

    if _owner_filter(actor) is None:
        raise CartNotFound("Cart session not found")

    with transaction.atomic():
        product = Product.objects.filter(pk=product_id).first()
        if product is None:
            raise ProductNotFound()

        cart = _lock_cart(actor, create=True)
        items = [dict(i) for i in (cart.items or [])]

        existing = next((i for i in items if str(i.get("productId")) == str(product.pk)), None)

        if existing is not None:
            wanted = int(existing["quantity"]) + 1
            if product.stock < wanted:
                raise OutOfStock(
                    "Not enough stock",
                    product_id=product.pk,
                    requested=wanted,
                    available=product.stock,
                )
            existing["quantity"] = wanted
            message = f"{product.name} updated in cart"
        else:
            if product.stock < 1:
                raise OutOfStock(
                    "Not enough stock",
                    product_id=product.pk,
                    requested=1,
                    available=product.stock,
                )
            items.append(_line_from_product(product, 1))
            message = f"{product.name} added to cart"

        _save_items(cart, items)

    logger.info(
        "Cart item added",
        extra={"cart_id": str(cart.pk), "product_id": str(product.pk), "lines": len(items)},
    )
    return ok(message, CartSerializer(cart).data)


@action_boundary
def remove_item_from_cart(actor: Actor, product_id) -> ActionResult:
    """Decrement one unit; the line disappears when it reaches 0."""
    with transaction.atomic():
        cart = _lock_cart(actor, create=False)
        items = [dict(i) for i in (cart.items or [])]

        existing = next((i for i in items if str(i.get("productId")) == str(product_id)), None)
        if existing is None:
            raise CartItemNotFound()

        quantity = int(existing["quantity"]) - 1
        if quantity <= 0:
            items = [i for i in items if i is not existing]
        else:
            existing["quantity"] = quantity

        _save_items(cart, items)

    logger.info(
        "Cart item removed",
        extra={"cart_id": str(cart.pk), "product_id": str(product_id), "lines": len(items)},
    )
    return ok(f"{existing['name']} was removed from cart", CartSerializer(cart).data)


def discard_session_cart(session_cart_id: str | None) -> int:
    """Delete the cart bound to a session token (sign-out). Returns rows deleted."""
    if not session_cart_id:
        return 0

    deleted, _ = Cart.objects.filter(session_cart_id=session_cart_id).delete()
    if deleted:
        logger.info("Session cart discarded", extra={"session_cart_id": session_cart_id})
    return deleted
