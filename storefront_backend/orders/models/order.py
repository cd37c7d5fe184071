# orders/models/order.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models

User = settings.AUTH_USER_MODEL


class Order(models.Model):
    """
    Completed checkout.

    Immutable after creation EXCEPT for the lifecycle fields:
    - is_paid / paid_at / payment_result  (payments.services.capture_orchestrator)
    - is_delivered / delivered_at         (orders.services.order_lifecycle)

    shipping_address + payment_method are snapshots of the user's checkout
    profile at order time, never live references.
    """

    STATUS_UNPAID = "unpaid"
    STATUS_PAID = "paid"
    STATUS_DELIVERED = "delivered"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name="orders",
    )

    shipping_address = models.JSONField(default=dict)
    payment_method = models.CharField(max_length=32)

    items_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    shipping_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    tax_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    total_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    is_paid = models.BooleanField(default=False)
    paid_at = models.DateTimeField(null=True, blank=True)

    # {"id", "status", "email_address", "pricePaid"}
    # Before capture this only holds the pending provider order id.
    payment_result = models.JSONField(null=True, blank=True)

    is_delivered = models.BooleanField(default=False)
    delivered_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "-created_at"], name="order_user_created_idx"),
            models.Index(fields=["is_paid"], name="order_is_paid_idx"),
        ]

    @property
    def status(self) -> str:
        if self.is_delivered:
            return self.STATUS_DELIVERED
        if self.is_paid:
            return self.STATUS_PAID
        return self.STATUS_UNPAID

    @property
    def pending_provider_order_id(self) -> str:
        result = self.payment_result or {}
        return str(result.get("id") or "")

    def __str__(self):
        return f"Order {self.id} | {self.status} | {self.total_price}"
