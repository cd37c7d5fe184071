"""
PATH: cart/models/cart.py

CART MODEL

Purpose:
- Mutable pre-checkout basket owned by a user OR an anonymous session token.
- Items are stored on the row as a JSON list so that items and the four
  derived price fields are always written by ONE update.

Rules:
- Owner resolution: user wins when present, else session_cart_id.
- One cart per session token, at most one cart per user.
- Price fields are derived (common.money.calc_price), never authored.
- Emptied (not deleted) when an order is assembled from it.
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models

User = settings.AUTH_USER_MODEL


class Cart(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="carts",
    )

    session_cart_id = models.CharField(max_length=64, unique=True)

    # [{"productId", "name", "slug", "image", "price": "25.00", "quantity": 3}, ...]
    items = models.JSONField(default=list, blank=True)

    items_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    shipping_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    tax_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    total_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["user"],
                condition=models.Q(user__isnull=False),
                name="one_cart_per_user",
            )
        ]

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def item_count(self) -> int:
        return sum(int(i.get("quantity", 0) or 0) for i in (self.items or []))

    def find_item(self, product_id) -> dict | None:
        pid = str(product_id)
        for item in self.items or []:
            if str(item.get("productId")) == pid:
                return item
        return None

    def __str__(self):
        owner = self.user_id or f"session:{self.session_cart_id}"
        return f"Cart {self.id} | {owner} | {len(self.items or [])} lines"
