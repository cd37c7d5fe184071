# orders/models/order_item.py

from django.db import models


class OrderItem(models.Model):
    """
    Point-in-time copy of one cart line.

    Never re-derived from the live Product. The product FK only
    anchors the line for the stock decrement.
    """

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )

    product = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="order_items",
    )

    name = models.CharField(max_length=255)
    slug = models.CharField(max_length=255)
    image = models.CharField(max_length=500, blank=True, default="")

    price = models.DecimalField(max_digits=12, decimal_places=2)
    quantity = models.PositiveIntegerField()

    class Meta:
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(
                fields=["order", "product"],
                name="unique_product_per_order",
            )
        ]

    def __str__(self):
        return f"{self.name} x {self.quantity}"
