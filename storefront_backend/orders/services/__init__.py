from .order_assembler import create_order
from .order_lifecycle import can_transition, deliver_order, validate_transition
from .order_queries import (
    delete_order,
    ensure_order_access,
    get_all_orders,
    get_my_orders,
    get_order_by_id,
    get_order_summary,
)

__all__ = [
    "can_transition",
    "create_order",
    "delete_order",
    "deliver_order",
    "ensure_order_access",
    "get_all_orders",
    "get_my_orders",
    "get_order_by_id",
    "get_order_summary",
    "validate_transition",
]
