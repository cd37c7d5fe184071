# common/http.py

"""
ActionResult -> DRF Response.

Views stay thin: they call a service, then hand the result here.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.response import Response

from common.results import ActionResult

STATUS_BY_CODE = {
    "invalid_input": status.HTTP_400_BAD_REQUEST,
    "not_authenticated": status.HTTP_401_UNAUTHORIZED,
    "forbidden": status.HTTP_403_FORBIDDEN,
    "not_found": status.HTTP_404_NOT_FOUND,
    "cart_not_found": status.HTTP_404_NOT_FOUND,
    "cart_item_not_found": status.HTTP_404_NOT_FOUND,
    "product_not_found": status.HTTP_404_NOT_FOUND,
    "order_not_found": status.HTTP_404_NOT_FOUND,
    "user_not_found": status.HTTP_404_NOT_FOUND,
    "out_of_stock": status.HTTP_409_CONFLICT,
    "already_paid": status.HTTP_409_CONFLICT,
    "not_yet_paid": status.HTTP_409_CONFLICT,
    "invalid_transition": status.HTTP_409_CONFLICT,
    "cart_empty": status.HTTP_409_CONFLICT,
    "missing_shipping_address": status.HTTP_409_CONFLICT,
    "missing_payment_method": status.HTTP_409_CONFLICT,
    "payment_verification_failed": status.HTTP_402_PAYMENT_REQUIRED,
    "provider_rejected": status.HTTP_502_BAD_GATEWAY,
    "provider_unavailable": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def result_response(result: ActionResult, *, success_status: int = status.HTTP_200_OK) -> Response:
    if result.success:
        return Response(result.to_dict(), status=success_status)

    http_status = STATUS_BY_CODE.get(result.code or "", status.HTTP_400_BAD_REQUEST)
    return Response(result.to_dict(), status=http_status)
