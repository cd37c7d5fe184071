# payments/views.py

"""
PAYMENT API VIEWS

- POST orders/<id>/payments/create/    provider order for the order total
- POST orders/<id>/payments/approve/   capture + verify + mark paid
- POST orders/<id>/pay-cod/            admin: cash-on-delivery confirmation
- POST payments/stripe/webhook/        signed Stripe delivery
"""

from __future__ import annotations

import logging

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView

from common.actor import actor_from_request
from common.http import result_response
from orders.serializers import ApproveOrderInputSerializer
from orders.services import ensure_order_access
from payments.services import (
    approve_provider_order,
    create_provider_order,
    handle_stripe_webhook,
    update_order_to_paid_cod,
)
from permissions.roles import IsAdmin

logger = logging.getLogger(__name__)


class CreateProviderOrderView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "payments"

    @extend_schema(request=None, responses={200: dict})
    def post(self, request, order_id):
        ensure_order_access(order_id, actor_from_request(request))
        return result_response(create_provider_order(order_id))


class ApproveProviderOrderView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "payments"

    @extend_schema(request=ApproveOrderInputSerializer, responses={200: dict})
    def post(self, request, order_id):
        ensure_order_access(order_id, actor_from_request(request))

        serializer = ApproveOrderInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = approve_provider_order(order_id, serializer.validated_data["orderID"])
        return result_response(result)


class PayOrderCODView(APIView):
    permission_classes = [IsAdmin]

    @extend_schema(request=None, responses={200: dict})
    def post(self, request, order_id):
        return result_response(update_order_to_paid_cod(order_id))


class StripeWebhookView(APIView):
    """
    Raw body is needed for the signature check, so request.data is never read.
    Duplicate deliveries are acknowledged with 200.
    """

    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "webhook"

    @extend_schema(request=None, responses={200: dict})
    def post(self, request, *args, **kwargs):
        raw_body = getattr(request, "body", b"") or b""
        signature = request.headers.get("Stripe-Signature")

        logger.info("Stripe webhook received")

        result = handle_stripe_webhook(raw_body, signature)
        if not result.success and result.code == "payment_verification_failed":
            return Response(result.to_dict(), status=status.HTTP_400_BAD_REQUEST)
        return result_response(result)
