# products/tests/test_inventory.py

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.db import transaction
from django.test import TestCase

from common.exceptions import OutOfStock
from orders.models import Order, OrderItem
from products.models import Product
from products.services.inventory import decrement_stock_for_order

User = get_user_model()


class InventoryDecrementTests(TestCase):
    """
    GUARANTEES:
    - Every order line decrements its product exactly by its quantity
    - Stock never goes negative
    - A shortfall on one line leaves every product untouched
    """

    def setUp(self):
        self.user = User.objects.create_user(email="stock@example.com", password="secret123")

        self.pen = Product.objects.create(name="Pen", slug="pen", price=Decimal("2.00"), stock=10)
        self.ink = Product.objects.create(name="Ink", slug="ink", price=Decimal("8.00"), stock=1)

        self.order = Order.objects.create(user=self.user, payment_method="PayPal")
        OrderItem.objects.create(
            order=self.order, product=self.pen, name="Pen", slug="pen", price=Decimal("2.00"), quantity=4
        )

    def test_decrement(self):
        with transaction.atomic():
            applied = decrement_stock_for_order(order=self.order)

        self.assertEqual(applied, {self.pen.pk: 4})
        self.pen.refresh_from_db()
        self.assertEqual(self.pen.stock, 6)

    def test_shortfall_is_all_or_nothing(self):
        OrderItem.objects.create(
            order=self.order, product=self.ink, name="Ink", slug="ink", price=Decimal("8.00"), quantity=2
        )

        with self.assertRaises(OutOfStock) as ctx:
            with transaction.atomic():
                decrement_stock_for_order(order=self.order)

        self.assertEqual(ctx.exception.requested, 2)
        self.assertEqual(ctx.exception.available, 1)

        self.pen.refresh_from_db()
        self.ink.refresh_from_db()
        self.assertEqual(self.pen.stock, 10)
        self.assertEqual(self.ink.stock, 1)

    def test_order_without_lines(self):
        empty = Order.objects.create(user=self.user, payment_method="PayPal")

        with transaction.atomic():
            self.assertEqual(decrement_stock_for_order(order=empty), {})
