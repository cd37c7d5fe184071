# cart/tests/test_cart_api.py

from decimal import Decimal

from django.test import TestCase
from rest_framework.test import APIClient

from products.models import Product


class CartApiTests(TestCase):
    """
    GUARANTEES:
    - Anonymous shoppers address their cart via X-Session-Cart-Id
    - No cart is a 200 empty state
    - Business failures map to stable HTTP statuses
    """

    def setUp(self):
        self.client = APIClient()
        self.client.credentials(HTTP_X_SESSION_CART_ID="api-session")
        self.product = Product.objects.create(
            name="Canvas Tote",
            slug="canvas-tote",
            price=Decimal("25.00"),
            stock=1,
        )
        self.payload = {
            "productId": str(self.product.pk),
            "name": self.product.name,
            "slug": self.product.slug,
            "price": "25.00",
            "quantity": 1,
        }

    def test_empty_cart(self):
        response = self.client.get("/api/cart/")

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.data["success"])
        self.assertIsNone(response.data["data"])

    def test_add_then_read(self):
        response = self.client.post("/api/cart/items/", self.payload, format="json")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["data"]["itemsPrice"], "25.00")
        self.assertEqual(response.data["data"]["sessionCartId"], "api-session")

        response = self.client.get("/api/cart/")
        self.assertEqual(response.data["data"]["totalPrice"], "38.75")

    def test_out_of_stock_is_conflict(self):
        self.client.post("/api/cart/items/", self.payload, format="json")
        response = self.client.post("/api/cart/items/", self.payload, format="json")

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data["code"], "out_of_stock")

    def test_remove_unknown_line_is_404(self):
        self.client.post("/api/cart/items/", self.payload, format="json")
        response = self.client.delete(
            "/api/cart/items/00000000-0000-0000-0000-000000000001/"
        )

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["code"], "cart_item_not_found")
