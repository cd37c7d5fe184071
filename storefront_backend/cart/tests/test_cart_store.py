# cart/tests/test_cart_store.py

from decimal import Decimal

from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import QuerySet
from django.test import TestCase, TransactionTestCase

from cart.models import Cart
from cart.services import (
    add_item_to_cart,
    discard_session_cart,
    get_my_cart,
    remove_item_from_cart,
)
from common.actor import Actor
from common.money import calc_price
from products.models import Product

User = get_user_model()


def item_payload(product, **overrides):
    data = {
        "productId": str(product.pk),
        "name": product.name,
        "slug": product.slug,
        "image": "",
        "price": str(product.price),
        "quantity": 1,
    }
    data.update(overrides)
    return data


class CartStoreTests(TestCase):
    """
    GUARANTEES:
    - Anonymous carts are keyed by the session token
    - Adding never exceeds available stock
    - Price fields always equal calc_price(items)
    - Removing decrements one unit and drops empty lines
    """

    def setUp(self):
        self.actor = Actor(session_cart_id="sess-abc")

        self.shirt = Product.objects.create(
            name="Polo Shirt",
            slug="polo-shirt",
            price=Decimal("25.00"),
            stock=10,
            images=["/images/polo.jpg"],
        )
        self.mug = Product.objects.create(
            name="Coffee Mug",
            slug="coffee-mug",
            price=Decimal("12.50"),
            stock=2,
        )

    def assert_prices_consistent(self, cart):
        expected = calc_price(cart.items)
        self.assertEqual(cart.items_price, expected.items_price)
        self.assertEqual(cart.shipping_price, expected.shipping_price)
        self.assertEqual(cart.tax_price, expected.tax_price)
        self.assertEqual(cart.total_price, expected.total_price)

    # ======================================================
    # ADD
    # ======================================================

    def test_first_add_creates_session_cart(self):
        result = add_item_to_cart(self.actor, item_payload(self.shirt))

        self.assertTrue(result.success)
        self.assertEqual(result.message, "Polo Shirt added to cart")

        cart = Cart.objects.get(session_cart_id="sess-abc")
        self.assertIsNone(cart.user_id)
        self.assertEqual(len(cart.items), 1)
        self.assertEqual(cart.items[0]["quantity"], 1)
        self.assertEqual(cart.items[0]["image"], "/images/polo.jpg")
        self.assert_prices_consistent(cart)

    def test_three_units_price_breakdown(self):
        for _ in range(3):
            add_item_to_cart(self.actor, item_payload(self.shirt))

        cart = Cart.objects.get(session_cart_id="sess-abc")
        self.assertEqual(cart.items[0]["quantity"], 3)
        self.assertEqual(cart.items_price, Decimal("75.00"))
        self.assertEqual(cart.shipping_price, Decimal("10.00"))
        self.assertEqual(cart.tax_price, Decimal("11.25"))
        self.assertEqual(cart.total_price, Decimal("96.25"))

    def test_repeat_add_reports_update(self):
        add_item_to_cart(self.actor, item_payload(self.shirt))
        result = add_item_to_cart(self.actor, item_payload(self.shirt))

        self.assertTrue(result.success)
        self.assertEqual(result.message, "Polo Shirt updated in cart")

    def test_price_is_taken_from_product_not_client(self):
        add_item_to_cart(self.actor, item_payload(self.shirt, price="0.01"))

        cart = Cart.objects.get(session_cart_id="sess-abc")
        self.assertEqual(cart.items[0]["price"], "25.00")
        self.assertEqual(cart.items_price, Decimal("25.00"))

    def test_stock_guard_on_existing_line(self):
        add_item_to_cart(self.actor, item_payload(self.mug))
        add_item_to_cart(self.actor, item_payload(self.mug))

        result = add_item_to_cart(self.actor, item_payload(self.mug))

        self.assertFalse(result.success)
        self.assertEqual(result.code, "out_of_stock")
        self.assertEqual(result.message, "Not enough stock")

        cart = Cart.objects.get(session_cart_id="sess-abc")
        self.assertEqual(cart.find_item(self.mug.pk)["quantity"], 2)
        self.assert_prices_consistent(cart)

    def test_out_of_stock_product_is_never_added(self):
        self.mug.stock = 0
        self.mug.save()

        result = add_item_to_cart(self.actor, item_payload(self.mug))

        self.assertFalse(result.success)
        self.assertEqual(result.code, "out_of_stock")
        cart = Cart.objects.filter(session_cart_id="sess-abc").first()
        self.assertTrue(cart is None or cart.find_item(self.mug.pk) is None)

    def test_unknown_product(self):
        payload = item_payload(self.shirt, productId="00000000-0000-0000-0000-000000000000")

        result = add_item_to_cart(self.actor, payload)

        self.assertFalse(result.success)
        self.assertEqual(result.code, "product_not_found")

    def test_invalid_shape_is_rejected_before_mutation(self):
        payload = item_payload(self.shirt)
        payload.pop("productId")

        result = add_item_to_cart(self.actor, payload)

        self.assertFalse(result.success)
        self.assertEqual(result.code, "invalid_input")
        self.assertFalse(Cart.objects.exists())

    def test_no_owner_means_no_cart(self):
        result = add_item_to_cart(Actor(), item_payload(self.shirt))

        self.assertFalse(result.success)
        self.assertEqual(result.code, "cart_not_found")
        self.assertEqual(result.message, "Cart session not found")

    def test_authenticated_user_cart_takes_precedence(self):
        user = User.objects.create_user(email="shopper@example.com", password="secret123")
        actor = Actor(user_id=str(user.pk), role="user", session_cart_id="sess-abc")

        add_item_to_cart(self.actor, item_payload(self.mug))
        add_item_to_cart(actor, item_payload(self.shirt))

        user_cart = get_my_cart(actor)
        self.assertEqual(user_cart.user_id, user.pk)
        self.assertIsNotNone(user_cart.find_item(self.shirt.pk))
        self.assertIsNone(user_cart.find_item(self.mug.pk))
        self.assertEqual(Cart.objects.count(), 2)

    # ======================================================
    # REMOVE
    # ======================================================

    def test_remove_decrements_then_drops_line(self):
        add_item_to_cart(self.actor, item_payload(self.shirt))
        add_item_to_cart(self.actor, item_payload(self.shirt))

        first = remove_item_from_cart(self.actor, self.shirt.pk)
        self.assertTrue(first.success)
        self.assertEqual(first.message, "Polo Shirt was removed from cart")

        cart = Cart.objects.get(session_cart_id="sess-abc")
        self.assertEqual(cart.find_item(self.shirt.pk)["quantity"], 1)
        self.assert_prices_consistent(cart)

        remove_item_from_cart(self.actor, self.shirt.pk)
        cart.refresh_from_db()
        self.assertEqual(cart.items, [])
        self.assertEqual(cart.items_price, Decimal("0.00"))
        self.assert_prices_consistent(cart)

    def test_remove_missing_item(self):
        add_item_to_cart(self.actor, item_payload(self.shirt))

        result = remove_item_from_cart(self.actor, self.mug.pk)

        self.assertFalse(result.success)
        self.assertEqual(result.code, "cart_item_not_found")

    def test_remove_without_cart(self):
        result = remove_item_from_cart(self.actor, self.shirt.pk)

        self.assertFalse(result.success)
        self.assertEqual(result.code, "cart_not_found")

    # ======================================================
    # READ / DISCARD
    # ======================================================

    def test_get_my_cart_absent_is_none(self):
        self.assertIsNone(get_my_cart(self.actor))
        self.assertIsNone(get_my_cart(Actor()))

    def test_discard_session_cart(self):
        add_item_to_cart(self.actor, item_payload(self.shirt))

        self.assertEqual(discard_session_cart("sess-abc"), 1)
        self.assertFalse(Cart.objects.exists())
        self.assertEqual(discard_session_cart(None), 0)


class CartSerializationTests(TransactionTestCase):
    """
    GUARANTEES:
    - Every cart mutation reads the cart under a row lock inside its own transaction
    - Committed adds from separate requests never push a line past stock
    """

    def setUp(self):
        self.mug = Product.objects.create(
            name="Coffee Mug",
            slug="coffee-mug",
            price=Decimal("12.50"),
            stock=2,
        )
        self.lock_calls = []

        original = QuerySet.select_for_update

        def spy(queryset, *args, **kwargs):
            if queryset.model is Cart:
                self.lock_calls.append(transaction.get_connection().in_atomic_block)
            return original(queryset, *args, **kwargs)

        patcher = patch.object(QuerySet, "select_for_update", autospec=True, side_effect=spy)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_mutations_lock_the_cart_row(self):
        actor = Actor(session_cart_id="sess-lock")

        add_item_to_cart(actor, item_payload(self.mug))
        remove_item_from_cart(actor, self.mug.pk)

        self.assertEqual(self.lock_calls, [True, True])

    def test_committed_adds_stop_at_stock(self):
        first_tab = Actor(session_cart_id="sess-shared")
        second_tab = Actor(session_cart_id="sess-shared")

        results = [
            add_item_to_cart(first_tab, item_payload(self.mug)),
            add_item_to_cart(second_tab, item_payload(self.mug)),
            add_item_to_cart(first_tab, item_payload(self.mug)),
        ]

        self.assertEqual([r.success for r in results], [True, True, False])
        self.assertEqual(results[2].code, "out_of_stock")

        cart = Cart.objects.get(session_cart_id="sess-shared")
        self.assertEqual(cart.find_item(self.mug.pk)["quantity"], 2)
        self.assertEqual(cart.items_price, Decimal("25.00"))
        self.assertEqual(len(self.lock_calls), 3)
