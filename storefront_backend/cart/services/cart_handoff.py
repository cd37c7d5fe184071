"""
======================================================
PATH: cart/services/cart_handoff.py
======================================================
CART HANDOFF ON SIGN-IN / SIGN-UP

When an anonymous shopper authenticates, their session cart is bound
to the user. What happens to a cart the user ALREADY had is a policy:

- OverrideUserCartPolicy (default): the session cart wins, any
  pre-existing user cart is deleted.
- MergeCartsPolicy: lines of the old user cart are folded into the
  session cart (quantities summed, session line data kept), then the
  old user cart is deleted.

Selected with settings.CART_SIGN_IN_POLICY ("override" | "merge").

A handoff failure is logged and never blocks authentication.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.db import DatabaseError, transaction

from cart.models import Cart
from common.money import calc_price

logger = logging.getLogger(__name__)


class CartHandoffPolicy(ABC):
    name = ""

    @abstractmethod
    def apply(self, *, user, session_cart: Cart) -> Cart:
        """Bind session_cart to user and return the user's cart."""
        ...


class OverrideUserCartPolicy(CartHandoffPolicy):
    name = "override"

    def apply(self, *, user, session_cart: Cart) -> Cart:
        replaced, _ = Cart.objects.filter(user=user).exclude(pk=session_cart.pk).delete()

        session_cart.user = user
        session_cart.save(update_fields=["user", "updated_at"])

        logger.info(
            "Session cart assigned to user",
            extra={
                "cart_id": str(session_cart.pk),
                "user_id": str(user.pk),
                "replaced_carts": replaced,
            },
        )
        return session_cart


class MergeCartsPolicy(CartHandoffPolicy):
    name = "merge"

    def apply(self, *, user, session_cart: Cart) -> Cart:
        previous = (
            Cart.objects.select_for_update()
            .filter(user=user)
            .exclude(pk=session_cart.pk)
            .first()
        )

        items = [dict(i) for i in (session_cart.items or [])]
        if previous is not None:
            by_product = {str(i["productId"]): i for i in items}
            for line in previous.items or []:
                pid = str(line.get("productId"))
                if pid in by_product:
                    by_product[pid]["quantity"] = int(by_product[pid]["quantity"]) + int(line["quantity"])
                else:
                    merged = dict(line)
                    items.append(merged)
                    by_product[pid] = merged
            previous.delete()

        prices = calc_price(items)
        session_cart.user = user
        session_cart.items = items
        for field, value in prices.as_model_fields().items():
            setattr(session_cart, field, value)
        session_cart.save(
            update_fields=[
                "user",
                "items",
                "items_price",
                "shipping_price",
                "tax_price",
                "total_price",
                "updated_at",
            ]
        )

        logger.info(
            "Session cart merged into user cart",
            extra={
                "cart_id": str(session_cart.pk),
                "user_id": str(user.pk),
                "merged_from": str(previous.pk) if previous else None,
                "lines": len(items),
            },
        )
        return session_cart


POLICIES: dict[str, type[CartHandoffPolicy]] = {
    OverrideUserCartPolicy.name: OverrideUserCartPolicy,
    MergeCartsPolicy.name: MergeCartsPolicy,
}


def get_handoff_policy() -> CartHandoffPolicy:
    key = (getattr(settings, "CART_SIGN_IN_POLICY", "") or OverrideUserCartPolicy.name).strip().lower()
    try:
        return POLICIES[key]()
    except KeyError as exc:
        raise ImproperlyConfigured(
            f"CART_SIGN_IN_POLICY must be one of {sorted(POLICIES)}, got {key!r}"
        ) from exc


def transfer_session_cart(user, session_cart_id: str | None, *, policy: CartHandoffPolicy | None = None) -> Cart | None:
    """
    Bind the anonymous cart identified by session_cart_id to user.

    Returns the user's cart after handoff, or None when there was
    nothing to hand off (or the handoff failed).
    """
    if not session_cart_id or user is None:
        return None

    policy = policy or get_handoff_policy()

    try:
        with transaction.atomic():
            session_cart = (
                Cart.objects.select_for_update()
                .filter(session_cart_id=session_cart_id)
                .first()
            )
            if session_cart is None:
                return None

            if session_cart.user_id == user.pk:
                return session_cart

            if session_cart.user_id is not None:
                logger.warning(
                    "Session cart belongs to another user, handoff skipped",
                    extra={"cart_id": str(session_cart.pk), "user_id": str(user.pk)},
                )
                return None

            return policy.apply(user=user, session_cart=session_cart)
    except DatabaseError:
        logger.exception(
            "Cart handoff failed",
            extra={"session_cart_id": session_cart_id, "user_id": str(user.pk)},
        )
        return None
