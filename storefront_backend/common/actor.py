# common/actor.py

"""
CURRENT ACTOR

The calling layer supplies identity as an explicit value:
- user_id / role when authenticated
- session_cart_id: the anonymous cart token (header or cookie)

Services never read cookies or request state themselves.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

SESSION_CART_HEADER = "X-Session-Cart-Id"
SESSION_CART_COOKIE = "sessionCartId"

ROLE_ADMIN = "admin"


@dataclass(frozen=True)
class Actor:
    user_id: Optional[str] = None
    role: Optional[str] = None
    session_cart_id: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_id)

    @property
    def is_admin(self) -> bool:
        return self.is_authenticated and self.role == ROLE_ADMIN


def session_cart_id_from_request(request) -> Optional[str]:
    token = (request.headers.get(SESSION_CART_HEADER) or "").strip()
    if not token:
        token = (request.COOKIES.get(SESSION_CART_COOKIE) or "").strip()
    return token or None


def actor_from_request(request) -> Actor:
    user = getattr(request, "user", None)
    session_cart_id = session_cart_id_from_request(request)

    if user is not None and user.is_authenticated:
        return Actor(
            user_id=str(user.pk),
            role=getattr(user, "role", None),
            session_cart_id=session_cart_id,
        )

    return Actor(session_cart_id=session_cart_id)
