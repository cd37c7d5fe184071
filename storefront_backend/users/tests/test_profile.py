# users/tests/test_profile.py

from django.contrib.auth import get_user_model
from django.test import TestCase

from common.actor import Actor
from users.services import update_user_address, update_user_payment_method

User = get_user_model()

ADDRESS = {
    "fullName": "Ada Buyer",
    "streetAddress": "12 Market Street",
    "city": "Toronto",
    "postalCode": "M5V 2T6",
    "country": "Canada",
}


class CheckoutProfileTests(TestCase):
    """
    GUARANTEES:
    - Address and payment method are validated before being saved
    - Only the authenticated actor's own profile is written
    """

    def setUp(self):
        self.user = User.objects.create_user(email="profile@example.com", password="secret123")
        self.actor = Actor(user_id=str(self.user.pk), role="user")

    def test_save_address(self):
        result = update_user_address(self.actor, ADDRESS)

        self.assertTrue(result.success)
        self.assertEqual(result.message, "User updated successfully")
        self.user.refresh_from_db()
        self.assertEqual(self.user.address, ADDRESS)

    def test_invalid_address(self):
        result = update_user_address(self.actor, {**ADDRESS, "city": "T"})

        self.assertFalse(result.success)
        self.assertEqual(result.code, "invalid_input")
        self.user.refresh_from_db()
        self.assertIsNone(self.user.address)

    def test_payment_method(self):
        self.assertTrue(update_user_payment_method(self.actor, {"type": "Stripe"}).success)
        self.user.refresh_from_db()
        self.assertEqual(self.user.payment_method, "Stripe")

        bad = update_user_payment_method(self.actor, {"type": "Bitcoin"})
        self.assertEqual(bad.code, "invalid_input")
        self.user.refresh_from_db()
        self.assertEqual(self.user.payment_method, "Stripe")

    def test_anonymous_actor(self):
        result = update_user_address(Actor(session_cart_id="s"), ADDRESS)

        self.assertEqual(result.code, "not_authenticated")
        self.assertEqual(result.redirect_to, "/sign-in")

    def test_deleted_user(self):
        actor = Actor(user_id="00000000-0000-0000-0000-000000000000", role="user")

        self.assertEqual(update_user_payment_method(actor, {"type": "PayPal"}).code, "user_not_found")
