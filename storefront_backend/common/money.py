# common/money.py

"""
MONEY / PRICING

Pure arithmetic shared by the cart and the order pipeline.

Hard rules:
- Decimal only. Floats are never used for money.
- Rounding is ROUND_HALF_UP to 2 places.
- calc_price() is the only place cart/order totals are derived.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Iterable, Mapping

from common.exceptions import InvalidInput

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")

FREE_SHIPPING_THRESHOLD = Decimal("100")
FLAT_SHIPPING_PRICE = Decimal("10")
TAX_RATE = Decimal("0.15")


def round2(value) -> Decimal:
    """
    Round a number or numeric string to 2 places (half-up).

    Strings and floats go through str() so that binary float noise
    (e.g. 1.005 stored as 1.00499999...) cannot pull a half-cent down.
    """
    if isinstance(value, bool) or value is None:
        raise InvalidInput("Value is not a number or string")

    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, (int, float)):
        number = Decimal(str(value))
    elif isinstance(value, str):
        try:
            number = Decimal(value.strip())
        except InvalidOperation as exc:
            raise InvalidInput(f"Value is not a number: {value!r}") from exc
    else:
        raise InvalidInput("Value is not a number or string")

    if not number.is_finite():
        raise InvalidInput(f"Value is not a finite number: {value!r}")

    with localcontext() as ctx:
        if number.adjusted() > ctx.Emax:
            raise InvalidInput(f"Value is out of range: {value!r}")
        # quantize needs every integer digit plus two places
        ctx.prec = max(ctx.prec, number.adjusted() + 3)
        try:
            return number.quantize(TWOPLACES, rounding=ROUND_HALF_UP)
        except InvalidOperation as exc:
            raise InvalidInput(f"Value is out of range: {value!r}") from exc


def money_str(value) -> str:
    return f"{round2(value):.2f}"


@dataclass(frozen=True)
class PriceSummary:
    items_price: Decimal
    shipping_price: Decimal
    tax_price: Decimal
    total_price: Decimal

    def as_strings(self) -> dict[str, str]:
        return {
            "itemsPrice": f"{self.items_price:.2f}",
            "shippingPrice": f"{self.shipping_price:.2f}",
            "taxPrice": f"{self.tax_price:.2f}",
            "totalPrice": f"{self.total_price:.2f}",
        }

    def as_model_fields(self) -> dict[str, Decimal]:
        return {
            "items_price": self.items_price,
            "shipping_price": self.shipping_price,
            "tax_price": self.tax_price,
            "total_price": self.total_price,
        }


ZERO_PRICES = PriceSummary(ZERO, ZERO, ZERO, ZERO)


def calc_price(items: Iterable[Mapping]) -> PriceSummary:
    """
    Derive the four price fields from cart lines.

    Each line needs "price" (unit price) and "quantity".
    Shipping is free strictly above the threshold.
    """
    items_price = round2(
        sum(
            (round2(item["price"]) * int(item["quantity"]) for item in items),
            ZERO,
        )
    )
    shipping_price = ZERO if items_price > FREE_SHIPPING_THRESHOLD else round2(FLAT_SHIPPING_PRICE)
    tax_price = round2(TAX_RATE * items_price)
    total_price = round2(items_price + shipping_price + tax_price)

    return PriceSummary(
        items_price=items_price,
        shipping_price=shipping_price,
        tax_price=tax_price,
        total_price=total_price,
    )


def to_minor_units(value) -> int:
    """Whole cents for provider APIs that bill in minor units."""
    return int((round2(value) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_minor_units(cents) -> str:
    return money_str(Decimal(int(cents or 0)) / Decimal("100"))
