# users/services/session_claims.py

"""
SESSION CLAIMS

Pure builder for the claims carried by an issued session token.

Input is an explicit, tagged SessionEvent instead of loosely-typed callback
arguments. The function never touches the database: when a display name has to
be derived it is returned as `name_to_persist` and the caller decides whether
to save it.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Mapping, Optional

from users.models import NO_NAME


class SessionTrigger(str, enum.Enum):
    SIGN_IN = "signIn"
    SIGN_UP = "signUp"
    UPDATE = "update"
    REFRESH = "refresh"


@dataclass(frozen=True)
class SessionEvent:
    trigger: SessionTrigger
    user_id: Optional[str] = None
    role: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    # Name sent by the client on an UPDATE trigger
    updated_name: Optional[str] = None


@dataclass(frozen=True)
class ClaimsOutcome:
    claims: dict = field(default_factory=dict)
    name_to_persist: Optional[str] = None
    transfer_session_cart: bool = False


def display_name_from_email(email: str) -> str:
    return (email or "").split("@")[0]


def build_token_claims(event: SessionEvent, previous: Optional[Mapping] = None) -> ClaimsOutcome:
    claims = dict(previous or {})
    name_to_persist = None

    # User data is only present on the initial sign-in / sign-up
    if event.user_id:
        claims["sub"] = str(event.user_id)
        claims["role"] = event.role
        claims["name"] = event.name

        if event.name == NO_NAME and event.email:
            claims["name"] = display_name_from_email(event.email)
            name_to_persist = claims["name"]

    if event.trigger == SessionTrigger.UPDATE and event.updated_name:
        claims["name"] = event.updated_name

    transfer = bool(event.user_id) and event.trigger in (
        SessionTrigger.SIGN_IN,
        SessionTrigger.SIGN_UP,
    )

    return ClaimsOutcome(
        claims=claims,
        name_to_persist=name_to_persist,
        transfer_session_cart=transfer,
    )
