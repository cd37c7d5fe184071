# users/services/tokens.py

"""
TOKEN ISSUANCE

SimpleJWT pair whose custom claims come from build_token_claims().
The "name" hint returned by the builder is persisted here, outside the
pure function.
"""

from __future__ import annotations

import logging

from rest_framework_simplejwt.tokens import RefreshToken

from users.services.session_claims import SessionEvent, SessionTrigger, build_token_claims

logger = logging.getLogger(__name__)

CUSTOM_CLAIMS = ("role", "name")


def issue_tokens(user, trigger: SessionTrigger, *, updated_name: str | None = None):
    """
    Returns (tokens, outcome).

    tokens = {"access": str, "refresh": str}
    """
    outcome = build_token_claims(
        SessionEvent(
            trigger=trigger,
            user_id=str(user.pk),
            role=user.role,
            name=user.name,
            email=user.email,
            updated_name=updated_name,
        )
    )

    if outcome.name_to_persist and outcome.name_to_persist != user.name:
        user.name = outcome.name_to_persist
        user.save(update_fields=["name", "updated_at"])
        logger.info("Display name derived from email", extra={"user_id": str(user.pk)})

    refresh = RefreshToken.for_user(user)
    for claim in CUSTOM_CLAIMS:
        refresh[claim] = outcome.claims.get(claim)

    tokens = {"access": str(refresh.access_token), "refresh": str(refresh)}
    return tokens, outcome
