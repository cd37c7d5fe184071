# permissions/roles.py

from __future__ import annotations

from typing import Optional

from rest_framework.permissions import BasePermission

from users.models import ROLE_ADMIN, ROLE_USER

# =========================================================
# ROLE CONSTANTS
# =========================================================
# "user": shopper. "admin": back office (orders, delivery, COD).
ROLES = {
    ROLE_ADMIN,
    ROLE_USER,
}


# =========================================================
# Helpers
# =========================================================
def get_user_role(user) -> Optional[str]:
    return getattr(user, "role", None)


def is_admin_user(user) -> bool:
    return bool(user and user.is_authenticated and get_user_role(user) == ROLE_ADMIN)


# =========================================================
# Base Role Permission (Internal Use)
# =========================================================
class BaseRolePermission(BasePermission):
    """
    Base permission for role-based access control.

    Subclasses must define:
    - allowed_roles (set)
    """

    allowed_roles: set[str] = set()

    def has_permission(self, request, view):
        user = request.user

        if not user or not user.is_authenticated:
            return False

        user_role = get_user_role(user)
        if not user_role:
            return False

        return user_role in self.allowed_roles


class IsAdmin(BaseRolePermission):
    allowed_roles = {ROLE_ADMIN}

