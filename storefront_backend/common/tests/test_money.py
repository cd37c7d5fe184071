# common/tests/test_money.py

from decimal import Decimal

from django.test import SimpleTestCase

from common.exceptions import InvalidInput
from common.money import calc_price, from_minor_units, round2, to_minor_units


class Round2Tests(SimpleTestCase):
    """
    GUARANTEES:
    - Half-up rounding to 2 places
    - Floats never leak binary noise into money
    - Non-numeric input is rejected with InvalidInput
    """

    def test_half_up_on_strings_and_floats(self):
        self.assertEqual(round2("1.005"), Decimal("1.01"))
        self.assertEqual(round2(1.005), Decimal("1.01"))
        self.assertEqual(round2("2.344"), Decimal("2.34"))
        self.assertEqual(round2(10), Decimal("10.00"))

    def test_rejects_non_numeric(self):
        for bad in ("abc", "", None, True, "NaN", "Infinity", object()):
            with self.subTest(value=bad):
                with self.assertRaises(InvalidInput):
                    round2(bad)

    def test_large_numeric_strings_are_rounded(self):
        self.assertEqual(round2("1e30"), Decimal("1000000000000000000000000000000.00"))
        self.assertEqual(round2("123456789012345678901234567890.125"), Decimal("123456789012345678901234567890.13"))

    def test_exponent_beyond_range_is_invalid_input(self):
        with self.assertRaises(InvalidInput):
            round2("1e9999999999")

    def test_minor_units(self):
        self.assertEqual(to_minor_units(Decimal("96.25")), 9625)
        self.assertEqual(from_minor_units(9625), "96.25")


class CalcPriceTests(SimpleTestCase):
    """
    GUARANTEES:
    - calc_price is the only derivation of cart/order totals
    - Shipping is free strictly above 100
    - Tax is 15% of items
    """

    def test_single_line_below_free_shipping(self):
        prices = calc_price([{"price": "25.00", "quantity": 3}])

        self.assertEqual(
            prices.as_strings(),
            {
                "itemsPrice": "75.00",
                "shippingPrice": "10.00",
                "taxPrice": "11.25",
                "totalPrice": "96.25",
            },
        )

    def test_threshold_is_strictly_greater_than_100(self):
        at_threshold = calc_price([{"price": "50.00", "quantity": 2}])
        above = calc_price([{"price": "100.01", "quantity": 1}])

        self.assertEqual(at_threshold.shipping_price, Decimal("10.00"))
        self.assertEqual(above.shipping_price, Decimal("0.00"))
        self.assertEqual(above.tax_price, Decimal("15.00"))
        self.assertEqual(above.total_price, Decimal("115.01"))

    def test_multiple_lines_total_is_sum_of_parts(self):
        prices = calc_price(
            [
                {"price": "19.99", "quantity": 2},
                {"price": "5.10", "quantity": 1},
            ]
        )

        self.assertEqual(prices.items_price, Decimal("45.08"))
        self.assertEqual(prices.tax_price, Decimal("6.76"))
        self.assertEqual(
            prices.total_price,
            round2(prices.items_price + prices.shipping_price + prices.tax_price),
        )

    def test_empty_items(self):
        prices = calc_price([])

        self.assertEqual(prices.items_price, Decimal("0.00"))
        self.assertEqual(prices.tax_price, Decimal("0.00"))
        self.assertEqual(prices.total_price, prices.shipping_price)
