# common/results.py

"""
UNIFORM ACTION RESULT

Every mutating storefront operation returns this shape:
    {"success": bool, "message": str, "data": ...}

Expected business outcomes (out of stock, already paid, missing address)
are results, not exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class ActionResult:
    success: bool
    message: str
    data: Any = None
    code: Optional[str] = None
    redirect_to: Optional[str] = None

    def to_dict(self) -> dict:
        out = {"success": self.success, "message": self.message}
        if self.data is not None:
            out["data"] = self.data
        if self.code:
            out["code"] = self.code
        if self.redirect_to:
            out["redirectTo"] = self.redirect_to
        return out


def ok(message: str, data: Any = None, *, redirect_to: Optional[str] = None) -> ActionResult:
    return ActionResult(success=True, message=message, data=data, redirect_to=redirect_to)


def fail(
    message: str,
    *,
    code: Optional[str] = None,
    redirect_to: Optional[str] = None,
    data: Any = None,
) -> ActionResult:
    return ActionResult(
        success=False,
        message=message,
        data=data,
        code=code,
        redirect_to=redirect_to,
    )
