from .capture_orchestrator import (
    approve_provider_order,
    create_provider_order,
    handle_stripe_webhook,
    mark_order_paid,
    update_order_to_paid,
    update_order_to_paid_cod,
)

__all__ = [
    "approve_provider_order",
    "create_provider_order",
    "handle_stripe_webhook",
    "mark_order_paid",
    "update_order_to_paid",
    "update_order_to_paid_cod",
]
