from .profile import get_user_for_actor, update_user_address, update_user_payment_method
from .session_claims import (
    ClaimsOutcome,
    SessionEvent,
    SessionTrigger,
    build_token_claims,
    display_name_from_email,
)
from .tokens import issue_tokens

__all__ = [
    "ClaimsOutcome",
    "SessionEvent",
    "SessionTrigger",
    "build_token_claims",
    "display_name_from_email",
    "get_user_for_actor",
    "issue_tokens",
    "update_user_address",
    "update_user_payment_method",
]
