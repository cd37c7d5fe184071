from .cart_handoff import (
    MergeCartsPolicy,
    OverrideUserCartPolicy,
    get_handoff_policy,
    transfer_session_cart,
)
from .cart_store import (
    add_item_to_cart,
    discard_session_cart,
    get_my_cart,
    remove_item_from_cart,
)

__all__ = [
    "MergeCartsPolicy",
    "OverrideUserCartPolicy",
    "add_item_to_cart",
    "discard_session_cart",
    "get_handoff_policy",
    "get_my_cart",
    "remove_item_from_cart",
    "transfer_session_cart",
]
