# users/services/profile.py

"""
CHECKOUT PROFILE

Saved shipping address + preferred payment method.
Order assembly reads both; neither is referenced live by an order.
"""

from __future__ import annotations

import logging

from django.contrib.auth import get_user_model

from common.actor import Actor
from common.boundary import action_boundary
from common.exceptions import NotAuthenticated, UserNotFound
from common.results import ActionResult, ok
from users.serializers import PaymentMethodSerializer, ShippingAddressSerializer

logger = logging.getLogger(__name__)

User = get_user_model()


def get_user_for_actor(actor: Actor):
    if not actor.is_authenticated:
        raise NotAuthenticated()
    user = User.objects.filter(pk=actor.user_id).first()
    if user is None:
        raise UserNotFound()
    return user


@action_boundary
def update_user_address(actor: Actor, data) -> ActionResult:
    user = get_user_for_actor(actor)

    s = ShippingAddressSerializer(data=data)
    s.is_valid(raise_exception=True)
    address = {k: v for k, v in s.validated_data.items() if v is not None}

    user.address = address
    user.save(update_fields=["address", "updated_at"])

    logger.info("Shipping address updated", extra={"user_id": str(user.pk)})
    return ok("User updated successfully", address)


@action_boundary
def update_user_payment_method(actor: Actor, data) -> ActionResult:
    user = get_user_for_actor(actor)

    s = PaymentMethodSerializer(data=data)
    s.is_valid(raise_exception=True)

    user.payment_method = s.validated_data["type"]
    user.save(update_fields=["payment_method", "updated_at"])

    logger.info(
        "Payment method updated",
        extra={"user_id": str(user.pk), "payment_method": user.payment_method},
    )
    return ok("User updated successfully", {"type": user.payment_method})
