# common/boundary.py

"""
ACTION BOUNDARY

Wraps an application-service function so that:
- expected storefront errors become ActionResult(success=False, ...)
- validation errors become one readable message
- DatabaseError is logged and re-raised as StorageFault
- anything else (programming errors) propagates untouched
"""

from __future__ import annotations

import functools
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError
from rest_framework.exceptions import ValidationError as DRFValidationError

from common.exceptions import (
    BusinessRuleViolation,
    InvalidInput,
    PaymentError,
    PaymentVerificationFailed,
    ProviderError,
    StorageFault,
    StorefrontError,
)
from common.results import ActionResult, fail

logger = logging.getLogger(__name__)

GENERIC_PAYMENT_MESSAGE = PaymentError.default_message


def _flatten_messages(detail) -> list[str]:
    if isinstance(detail, dict):
        out: list[str] = []
        for value in detail.values():
            out.extend(_flatten_messages(value))
        return out
    if isinstance(detail, (list, tuple)):
        out = []
        for value in detail:
            out.extend(_flatten_messages(value))
        return out
    return [str(detail)]


def format_validation_error(exc) -> str:
    if isinstance(exc, DRFValidationError):
        messages = _flatten_messages(exc.detail)
    elif isinstance(exc, DjangoValidationError):
        if hasattr(exc, "message_dict"):
            messages = _flatten_messages(exc.message_dict)
        else:
            messages = list(exc.messages)
    else:
        messages = [str(exc)]
    return ". ".join(m for m in messages if m) or InvalidInput.default_message


def error_to_result(exc: StorefrontError) -> ActionResult:
    if isinstance(exc, ProviderError):
        return fail(GENERIC_PAYMENT_MESSAGE, code=exc.code)

    if isinstance(exc, PaymentVerificationFailed):
        return fail(exc.message, code=exc.code)

    redirect_to = exc.redirect_to if isinstance(exc, BusinessRuleViolation) else None
    return fail(exc.message, code=exc.code, redirect_to=redirect_to)


def action_boundary(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> ActionResult:
        try:
            return func(*args, **kwargs)
        except StorageFault:
            raise
        except ProviderError as exc:
            logger.warning(
                "Payment provider call failed",
                extra={
                    "action": func.__name__,
                    "provider": exc.provider,
                    "provider_status": exc.status,
                    "code": exc.code,
                    "detail": exc.message,
                },
            )
            return error_to_result(exc)
        except StorefrontError as exc:
            logger.info(
                "Action rejected",
                extra={"action": func.__name__, "code": exc.code, "detail": exc.message},
            )
            return error_to_result(exc)
        except (DRFValidationError, DjangoValidationError) as exc:
            return fail(format_validation_error(exc), code=InvalidInput.code)
        except DatabaseError as exc:
            logger.exception("Storage fault", extra={"action": func.__name__})
            raise StorageFault() from exc

    return wrapper
