# orders/tests/test_order_api.py

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from cart.models import Cart
from common.money import calc_price
from orders.models import Order
from products.models import Product

User = get_user_model()


class OrderApiTests(TestCase):
    """
    GUARANTEES:
    - Shoppers create orders and read only their own
    - Admin endpoints reject shoppers
    - Lifecycle conflicts surface as 409
    """

    def setUp(self):
        self.shopper = User.objects.create_user(
            email="shopper@example.com",
            password="secret123",
            name="Shay",
            address={
                "fullName": "Shay Shopper",
                "streetAddress": "1 Main St",
                "city": "Ottawa",
                "postalCode": "K1A 0B1",
                "country": "Canada",
            },
            payment_method="PayPal",
        )
        self.admin = User.objects.create_user(
            email="boss@example.com",
            password="secret123",
            role="admin",
        )
        self.product = Product.objects.create(
            name="Water Bottle",
            slug="water-bottle",
            price=Decimal("18.00"),
            stock=5,
        )
        items = [
            {
                "productId": str(self.product.pk),
                "name": self.product.name,
                "slug": self.product.slug,
                "image": "",
                "price": "18.00",
                "quantity": 2,
            }
        ]
        Cart.objects.create(
            user=self.shopper,
            session_cart_id="api-orders",
            items=items,
            **calc_price(items).as_model_fields(),
        )

        self.client = APIClient()

    def test_create_and_read_own_order(self):
        self.client.force_authenticate(self.shopper)

        response = self.client.post("/api/orders/")
        self.assertEqual(response.status_code, 201)
        order_id = response.data["data"]["orderId"]
        self.assertEqual(response.data["redirectTo"], f"/order/{order_id}")

        response = self.client.get(f"/api/orders/{order_id}/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["total_price"], "51.40")

        response = self.client.get("/api/orders/mine/")
        self.assertEqual(len(response.data["data"]), 1)

    def test_empty_cart_is_conflict(self):
        Cart.objects.filter(user=self.shopper).update(items=[])
        self.client.force_authenticate(self.shopper)

        response = self.client.post("/api/orders/")

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data["redirectTo"], "/cart")

    def test_other_users_order_is_forbidden(self):
        order = Order.objects.create(user=self.admin, payment_method="PayPal")
        self.client.force_authenticate(self.shopper)

        response = self.client.get(f"/api/orders/{order.pk}/")

        self.assertEqual(response.status_code, 403)

    def test_admin_only_endpoints(self):
        self.client.force_authenticate(self.shopper)

        self.assertEqual(self.client.get("/api/orders/").status_code, 403)
        self.assertEqual(self.client.get("/api/orders/summary/").status_code, 403)

        self.client.force_authenticate(self.admin)
        self.assertEqual(self.client.get("/api/orders/").status_code, 200)
        self.assertEqual(self.client.get("/api/orders/summary/").status_code, 200)

    def test_deliver_unpaid_is_conflict(self):
        order = Order.objects.create(user=self.shopper, payment_method="PayPal")
        self.client.force_authenticate(self.admin)

        response = self.client.post(f"/api/orders/{order.pk}/deliver/")

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data["code"], "not_yet_paid")

    def test_anonymous_is_rejected(self):
        response = self.client.post("/api/orders/")
        self.assertEqual(response.status_code, 401)
