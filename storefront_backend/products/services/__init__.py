from .inventory import decrement_stock_for_order

__all__ = [
    "decrement_stock_for_order",
]
