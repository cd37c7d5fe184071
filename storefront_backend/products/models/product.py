# products/models/product.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models


class Product(models.Model):
    """
    Represents a sellable catalog product.

    STOCK MODEL (IMPORTANT):
    - stock is an integer count, never negative.
    - The checkout pipeline only READS stock while carting.
    - stock is decremented exactly once per order, when the order is confirmed paid
      (products.services.inventory).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=255, db_index=True)
    slug = models.SlugField(max_length=255, unique=True)

    category = models.CharField(max_length=120, blank=True, default="")
    brand = models.CharField(max_length=120, blank=True, default="")
    description = models.TextField(blank=True, default="")

    images = models.JSONField(default=list, blank=True)

    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )

    stock = models.PositiveIntegerField(default=0)

    is_featured = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(stock__gte=0),
                name="product_stock_non_negative",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.slug})"

    def clean(self):
        if self.price is None or Decimal(self.price) < 0:
            raise ValidationError("Price cannot be negative")

    @property
    def primary_image(self) -> str:
        images = self.images or []
        return str(images[0]) if images else ""
