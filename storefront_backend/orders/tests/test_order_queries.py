# orders/tests/test_order_queries.py

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.utils import timezone

from common.actor import Actor
from common.exceptions import Forbidden, NotAuthenticated, OrderNotFound
from orders.models import Order, OrderItem
from orders.services import (
    delete_order,
    ensure_order_access,
    get_all_orders,
    get_my_orders,
    get_order_by_id,
    get_order_summary,
)
from products.models import Product

User = get_user_model()


class OrderQueryTests(TestCase):
    """
    GUARANTEES:
    - Orders are readable by their owner or an admin only
    - History is paginated newest first
    - In-flight paid orders cannot be deleted
    """

    def setUp(self):
        self.owner = User.objects.create_user(email="owner@example.com", password="secret123", name="Olive")
        self.stranger = User.objects.create_user(email="stranger@example.com", password="secret123", name="Sam")
        self.admin = User.objects.create_user(email="admin@example.com", password="secret123", role="admin")

        self.owner_actor = Actor(user_id=str(self.owner.pk), role="user")
        self.stranger_actor = Actor(user_id=str(self.stranger.pk), role="user")
        self.admin_actor = Actor(user_id=str(self.admin.pk), role="admin")

        self.product = Product.objects.create(
            name="Notebook",
            slug="notebook",
            price=Decimal("10.00"),
            stock=50,
        )
        self.order = self.make_order(self.owner, Decimal("21.50"))

    def make_order(self, user, total):
        order = Order.objects.create(
            user=user,
            shipping_address={"city": "Toronto"},
            payment_method="PayPal",
            items_price=Decimal("10.00"),
            shipping_price=Decimal("10.00"),
            tax_price=Decimal("1.50"),
            total_price=total,
        )
        OrderItem.objects.create(
            order=order,
            product=self.product,
            name=self.product.name,
            slug=self.product.slug,
            price=Decimal("10.00"),
            quantity=1,
        )
        return order

    # ======================================================
    # SINGLE ORDER
    # ======================================================

    def test_owner_reads_full_order(self):
        data = get_order_by_id(self.order.pk, self.owner_actor)

        self.assertEqual(data["user"]["email"], "owner@example.com")
        self.assertEqual(data["status"], "unpaid")
        self.assertEqual(len(data["items"]), 1)
        self.assertEqual(data["items"][0]["quantity"], 1)

    def test_admin_reads_any_order(self):
        data = get_order_by_id(self.order.pk, self.admin_actor)
        self.assertEqual(data["user"]["name"], "Olive")

    def test_stranger_is_forbidden(self):
        with self.assertRaises(Forbidden):
            get_order_by_id(self.order.pk, self.stranger_actor)
        with self.assertRaises(Forbidden):
            ensure_order_access(self.order.pk, self.stranger_actor)

    def test_anonymous_and_missing(self):
        with self.assertRaises(NotAuthenticated):
            get_order_by_id(self.order.pk, Actor())
        with self.assertRaises(OrderNotFound):
            get_order_by_id("00000000-0000-0000-0000-000000000000", self.owner_actor)

    # ======================================================
    # LISTS
    # ======================================================

    def test_my_orders_pagination(self):
        for _ in range(6):
            self.make_order(self.owner, Decimal("5.00"))
        self.make_order(self.stranger, Decimal("5.00"))

        first = get_my_orders(self.owner_actor, page=1, limit=6)
        second = get_my_orders(self.owner_actor, page=2, limit=6)

        self.assertEqual(first["totalPages"], 2)
        self.assertEqual(len(first["data"]), 6)
        self.assertEqual(len(second["data"]), 1)
        self.assertEqual(second["page"], 2)

    def test_all_orders_filter_by_customer_name(self):
        self.make_order(self.stranger, Decimal("5.00"))

        everything = get_all_orders(query="all")
        olive_only = get_all_orders(query="oliv")

        self.assertEqual(len(everything["data"]), 2)
        self.assertEqual(len(olive_only["data"]), 1)
        self.assertEqual(olive_only["data"][0]["user_name"], "Olive")

    # ======================================================
    # DELETE
    # ======================================================

    def test_delete_unpaid_order(self):
        result = delete_order(self.order.pk)

        self.assertTrue(result.success)
        self.assertFalse(Order.objects.filter(pk=self.order.pk).exists())

    def test_paid_undelivered_order_is_kept(self):
        self.order.is_paid = True
        self.order.paid_at = timezone.now()
        self.order.save()

        result = delete_order(self.order.pk)

        self.assertFalse(result.success)
        self.assertEqual(result.code, "invalid_transition")
        self.assertTrue(Order.objects.filter(pk=self.order.pk).exists())

    # ======================================================
    # SUMMARY
    # ======================================================

    def test_summary_counts_and_totals(self):
        self.make_order(self.stranger, Decimal("8.50"))

        summary = get_order_summary()

        self.assertEqual(summary["ordersCount"], 2)
        self.assertEqual(summary["productsCount"], 1)
        self.assertEqual(summary["usersCount"], 3)
        self.assertEqual(summary["totalSales"], "30.00")
        self.assertEqual(len(summary["salesData"]), 1)
        self.assertEqual(summary["salesData"][0]["totalSales"], "30.00")
        self.assertEqual(len(summary["latestSales"]), 2)
