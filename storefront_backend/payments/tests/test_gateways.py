# payments/tests/test_gateways.py

import hashlib
import hmac
import io
import json
import time
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import MagicMock, patch
from urllib.error import HTTPError, URLError

import stripe
from django.core.exceptions import ImproperlyConfigured
from django.test import SimpleTestCase, override_settings

from common.exceptions import (
    InvalidInput,
    PaymentVerificationFailed,
    ProviderRejectedError,
    RetryableProviderError,
)
from payments.gateways import (
    FakeGateway,
    PayPalGateway,
    StripeGateway,
    get_gateway,
    reset_gateways,
    set_gateway,
)


def paypal_response(payload):
    resp = MagicMock()
    resp.__enter__.return_value.read.return_value = json.dumps(payload).encode("utf-8")
    return resp


def paypal_http_error(code, body=b"{}"):
    return HTTPError(
        "https://api-m.sandbox.paypal.com/v2/checkout/orders",
        code,
        "error",
        {},
        io.BytesIO(body),
    )


class PayPalGatewayTests(SimpleTestCase):
    """
    GUARANTEES:
    - Orders are created for the exact order total with intent CAPTURE
    - Capture responses are normalized (id, status, payer email, amount)
    - 5xx / 429 / network errors are retryable, other 4xx are rejections
    """

    def setUp(self):
        self.gateway = PayPalGateway(
            client_id="client",
            app_secret="secret",
            api_url="https://api-m.sandbox.paypal.com/",
            timeout=3,
        )

    @patch("payments.gateways.paypal_adapter.urlopen")
    def test_create_remote_order(self, mock_urlopen):
        mock_urlopen.side_effect = [
            paypal_response({"access_token": "tok"}),
            paypal_response({"id": "PAYPAL-ORDER-1", "status": "CREATED"}),
        ]

        remote = self.gateway.create_remote_order(amount=Decimal("96.25"), order_id="order-1")

        self.assertEqual(remote.id, "PAYPAL-ORDER-1")

        token_req = mock_urlopen.call_args_list[0].args[0]
        self.assertEqual(token_req.full_url, "https://api-m.sandbox.paypal.com/v1/oauth2/token")
        self.assertTrue(token_req.get_header("Authorization").startswith("Basic "))

        order_req = mock_urlopen.call_args_list[1].args[0]
        self.assertEqual(order_req.full_url, "https://api-m.sandbox.paypal.com/v2/checkout/orders")
        self.assertEqual(order_req.get_header("Authorization"), "Bearer tok")
        body = json.loads(order_req.data)
        self.assertEqual(body["intent"], "CAPTURE")
        self.assertEqual(body["purchase_units"][0]["amount"], {"currency_code": "USD", "value": "96.25"})
        self.assertEqual(mock_urlopen.call_args_list[1].kwargs["timeout"], 3)

    @patch("payments.gateways.paypal_adapter.urlopen")
    def test_capture_is_normalized(self, mock_urlopen):
        mock_urlopen.side_effect = [
            paypal_response({"access_token": "tok"}),
            paypal_response(
                {
                    "id": "PAYPAL-ORDER-1",
                    "status": "COMPLETED",
                    "payer": {"email_address": "buyer@example.com"},
                    "purchase_units": [
                        {"payments": {"captures": [{"amount": {"value": "96.25"}}]}}
                    ],
                }
            ),
        ]

        capture = self.gateway.capture_remote_payment("PAYPAL-ORDER-1")

        self.assertEqual(capture.id, "PAYPAL-ORDER-1")
        self.assertEqual(capture.status, "COMPLETED")
        self.assertEqual(
            capture.as_payment_result(),
            {
                "id": "PAYPAL-ORDER-1",
                "status": "COMPLETED",
                "email_address": "buyer@example.com",
                "pricePaid": "96.25",
            },
        )
        capture_req = mock_urlopen.call_args_list[1].args[0]
        self.assertTrue(capture_req.full_url.endswith("/v2/checkout/orders/PAYPAL-ORDER-1/capture"))

    @patch("payments.gateways.paypal_adapter.urlopen")
    def test_already_captured_order_is_looked_up(self, mock_urlopen):
        mock_urlopen.side_effect = [
            paypal_response({"access_token": "tok"}),
            paypal_http_error(422, b'{"name": "UNPROCESSABLE_ENTITY", "details": [{"issue": "ORDER_ALREADY_CAPTURED"}]}'),
            paypal_response({"access_token": "tok"}),
            paypal_response(
                {
                    "id": "PAYPAL-ORDER-1",
                    "status": "COMPLETED",
                    "payer": {"email_address": "buyer@example.com"},
                    "purchase_units": [
                        {"payments": {"captures": [{"amount": {"value": "96.25"}}]}}
                    ],
                }
            ),
        ]

        capture = self.gateway.capture_remote_payment("PAYPAL-ORDER-1")

        self.assertEqual(capture.id, "PAYPAL-ORDER-1")
        self.assertEqual(capture.status, "COMPLETED")
        self.assertEqual(capture.amount, "96.25")

        lookup_req = mock_urlopen.call_args_list[3].args[0]
        self.assertEqual(lookup_req.get_method(), "GET")
        self.assertEqual(lookup_req.full_url, "https://api-m.sandbox.paypal.com/v2/checkout/orders/PAYPAL-ORDER-1")
        self.assertIsNone(lookup_req.data)

    @patch("payments.gateways.paypal_adapter.urlopen")
    def test_other_unprocessable_capture_is_rejection(self, mock_urlopen):
        mock_urlopen.side_effect = [
            paypal_response({"access_token": "tok"}),
            paypal_http_error(422, b'{"details": [{"issue": "INSTRUMENT_DECLINED"}]}'),
        ]

        with self.assertRaises(ProviderRejectedError):
            self.gateway.capture_remote_payment("PAYPAL-ORDER-1")
        self.assertEqual(mock_urlopen.call_count, 2)

    def test_webhooks_are_refused(self):
        with self.assertRaises(PaymentVerificationFailed):
            self.gateway.parse_webhook_event(b"{}", "sig")

    @patch("payments.gateways.paypal_adapter.urlopen")
    def test_empty_capture(self, mock_urlopen):
        mock_urlopen.side_effect = [paypal_response({"access_token": "tok"}), paypal_response({})]

        self.assertTrue(self.gateway.capture_remote_payment("X").is_empty)

    @patch("payments.gateways.paypal_adapter.urlopen")
    def test_error_classification(self, mock_urlopen):
        cases = [
            (paypal_http_error(503), RetryableProviderError),
            (paypal_http_error(429), RetryableProviderError),
            (paypal_http_error(422, b'{"name": "UNPROCESSABLE_ENTITY"}'), ProviderRejectedError),
            (URLError("connection refused"), RetryableProviderError),
            (TimeoutError("timed out"), RetryableProviderError),
        ]
        for error, expected in cases:
            with self.subTest(error=error):
                mock_urlopen.side_effect = error
                with self.assertRaises(expected):
                    self.gateway.create_remote_order(amount=Decimal("10.00"), order_id="o")

    @patch("payments.gateways.paypal_adapter.urlopen")
    def test_non_json_is_rejection(self, mock_urlopen):
        resp = MagicMock()
        resp.__enter__.return_value.read.return_value = b"<html>bad gateway</html>"
        mock_urlopen.return_value = resp

        with self.assertRaises(ProviderRejectedError):
            self.gateway.capture_remote_payment("X")

    @override_settings(PAYMENTS={"PAYPAL": {"CLIENT_ID": "", "APP_SECRET": ""}})
    def test_missing_credentials(self):
        with self.assertRaises(ImproperlyConfigured):
            PayPalGateway.from_settings()


class StripeGatewayTests(SimpleTestCase):
    """
    GUARANTEES:
    - PaymentIntents are created in minor units with the order id in metadata
    - "succeeded" is reported as COMPLETED
    - Webhooks are only trusted with a valid signature
    """

    def setUp(self):
        self.client = MagicMock()
        self.gateway = StripeGateway(
            secret_key="sk_test_123",
            webhook_secret="whsec_unit",
            client=self.client,
        )

    def test_create_payment_intent(self):
        self.client.payment_intents.create.return_value = SimpleNamespace(
            id="pi_123",
            client_secret="pi_123_secret",
        )

        remote = self.gateway.create_remote_order(amount=Decimal("96.25"), order_id="order-9")

        self.assertEqual(remote.id, "pi_123")
        self.assertEqual(remote.client_secret, "pi_123_secret")
        params = self.client.payment_intents.create.call_args.kwargs["params"]
        self.assertEqual(params["amount"], 9625)
        self.assertEqual(params["currency"], "cad")
        self.assertEqual(params["metadata"], {"orderId": "order-9"})

    def test_capture_maps_succeeded(self):
        intent = MagicMock()
        intent.to_dict.return_value = {
            "id": "pi_123",
            "status": "succeeded",
            "amount_received": 9625,
            "receipt_email": "buyer@example.com",
        }
        self.client.payment_intents.retrieve.return_value = intent

        capture = self.gateway.capture_remote_payment("pi_123")

        self.assertEqual(capture.status, "COMPLETED")
        self.assertEqual(capture.amount, "96.25")
        self.assertEqual(capture.email_address, "buyer@example.com")

    def test_capture_keeps_other_statuses(self):
        intent = MagicMock()
        intent.to_dict.return_value = {"id": "pi_123", "status": "processing"}
        self.client.payment_intents.retrieve.return_value = intent

        self.assertEqual(self.gateway.capture_remote_payment("pi_123").status, "PROCESSING")

    def test_error_classification(self):
        self.client.payment_intents.create.side_effect = stripe.APIConnectionError("network down")
        with self.assertRaises(RetryableProviderError):
            self.gateway.create_remote_order(amount=Decimal("1.00"), order_id="o")

        self.client.payment_intents.create.side_effect = stripe.InvalidRequestError(
            "Amount must be positive", "amount"
        )
        with self.assertRaises(ProviderRejectedError):
            self.gateway.create_remote_order(amount=Decimal("1.00"), order_id="o")

    def test_signed_webhook(self):
        payload = json.dumps(
            {"id": "evt_1", "object": "event", "type": "payment_intent.succeeded", "data": {"object": {}}}
        )
        timestamp = int(time.time())
        digest = hmac.new(
            b"whsec_unit",
            f"{timestamp}.{payload}".encode("utf-8"),
            hashlib.sha256,
        ).hexdigest()

        event = self.gateway.parse_webhook_event(payload.encode("utf-8"), f"t={timestamp},v1={digest}")

        self.assertEqual(event["type"], "payment_intent.succeeded")

    def test_bad_signature(self):
        with self.assertRaises(PaymentVerificationFailed):
            self.gateway.parse_webhook_event(b"{}", "t=1,v1=deadbeef")


class GatewayRegistryTests(SimpleTestCase):
    def setUp(self):
        reset_gateways()
        self.addCleanup(reset_gateways)

    def test_fake_backend_is_shared(self):
        self.assertIsInstance(get_gateway("PayPal"), FakeGateway)
        self.assertIs(get_gateway("PayPal"), get_gateway("Stripe"))

    def test_override(self):
        gateway = FakeGateway()
        set_gateway("Stripe", gateway)

        self.assertIs(get_gateway("Stripe"), gateway)
        self.assertIsNot(get_gateway("PayPal"), gateway)

    def test_cod_has_no_gateway(self):
        with self.assertRaises(InvalidInput):
            get_gateway("CashOnDelivery")
