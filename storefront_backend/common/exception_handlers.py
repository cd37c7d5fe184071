# common/exception_handlers.py

"""
DRF EXCEPTION HANDLER

Storage faults surface as a generic 503.
Storefront errors that reach a view unconverted get a stable status code.
"""

from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from common.boundary import error_to_result
from common.exceptions import (
    BusinessRuleViolation,
    Forbidden,
    InvalidInput,
    NotAuthenticated,
    NotFoundError,
    PaymentError,
    RetryableProviderError,
    StorageFault,
    StorefrontError,
)

logger = logging.getLogger(__name__)


def status_for_error(exc: StorefrontError) -> int:
    if isinstance(exc, StorageFault):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    if isinstance(exc, InvalidInput):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, NotAuthenticated):
        return status.HTTP_401_UNAUTHORIZED
    if isinstance(exc, Forbidden):
        return status.HTTP_403_FORBIDDEN
    if isinstance(exc, BusinessRuleViolation):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, RetryableProviderError):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    if isinstance(exc, PaymentError):
        return status.HTTP_502_BAD_GATEWAY
    return status.HTTP_400_BAD_REQUEST


def storefront_exception_handler(exc, context):
    response = exception_handler(exc, context)
    if response is not None:
        return response

    if isinstance(exc, StorageFault):
        view = context.get("view")
        logger.error(
            "Storage fault reached API layer",
            extra={"view": view.__class__.__name__ if view else None},
        )
        return Response(
            {"success": False, "message": exc.message, "code": exc.code},
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    if isinstance(exc, StorefrontError):
        return Response(error_to_result(exc).to_dict(), status=status_for_error(exc))

    return None
