# permissions/roles.py

from __future__ import annotations

from typing import Optional

from rest_framework.permissions import BasePermission


# =========================================================
# ROLE CONSTANTS
# =========================================================
ROLE_ADMIN = "admin"
ROLE_BASE_AGENT = "base_agent"

STAFF_ROLES = {
    ROLE_ADMIN,
    ROLE_BASE_AGENT,
}


# =========================================================
# CAPABILITIES (THE REAL PERMISSION LANGUAGE)
# =========================================================
# Views protect capabilities, not raw roles.
CAP_PURCHASE_WRITE = "purchase.write"
CAP_PURCHASE_BATCH_DELETE = "purchase.batch_delete"

CAP_PAYABLE_VIEW = "payable.view"
CAP_PAYABLE_SET_STATUS = "payable.set_status"

CAP_PAYMENT_CREATE = "payment.create"
CAP_PAYMENT_DELETE = "payment.delete"

CAP_EXPENSE_WRITE = "expense.write"
CAP_ANALYTICS_VIEW = "analytics.view"
CAP_ROLLUP_REFRESH = "analytics.refresh"

CAP_MASTERDATA_EDIT = "masterdata.edit"  # bases, suppliers, products, unit specs

ALL_CAPABILITIES = {
    CAP_PURCHASE_WRITE,
    CAP_PURCHASE_BATCH_DELETE,
    CAP_PAYABLE_VIEW,
    CAP_PAYABLE_SET_STATUS,
    CAP_PAYMENT_CREATE,
    CAP_PAYMENT_DELETE,
    CAP_EXPENSE_WRITE,
    CAP_ANALYTICS_VIEW,
    CAP_ROLLUP_REFRESH,
    CAP_MASTERDATA_EDIT,
}


# =========================================================
# ROLE → CAPABILITY MAP
# =========================================================
ROLE_CAPABILITIES: dict[str, set[str]] = {
    ROLE_ADMIN: {
        *ALL_CAPABILITIES,
    },
    ROLE_BASE_AGENT: {
        CAP_PURCHASE_WRITE,
        CAP_PAYABLE_VIEW,
        CAP_PAYMENT_CREATE,
        CAP_EXPENSE_WRITE,
        CAP_ANALYTICS_VIEW,
        # no batch delete, status overrides, payment deletes or rollup refresh
    },
}


# =========================================================
# Helpers
# =========================================================
def get_user_role(user) -> Optional[str]:
    return getattr(user, "role", None)


def get_request_role(request) -> Optional[str]:
    """
    Role from the bearer token claims when present, else from the user row.
    """
    token = getattr(request, "auth", None)
    if token is not None and hasattr(token, "get"):
        role = token.get("role")
        if role:
            return role
    return get_user_role(getattr(request, "user", None))


def effective_capabilities_for(request) -> set[str]:
    return set(ROLE_CAPABILITIES.get(get_request_role(request), set()))


# =========================================================
# Base Role Permission (Internal Use)
# =========================================================
class BaseRolePermission(BasePermission):
    """
    Subclasses must define:
    - allowed_roles (set)
    """

    allowed_roles: set[str] = set()

    def has_permission(self, request, view):
        user = request.user

        if not user or not user.is_authenticated:
            return False

        role = get_request_role(request)
        if not role:
            return False

        return role in self.allowed_roles


# =========================================================
# Capability Permission
# =========================================================
class HasCapability(BasePermission):
    """
    Require a specific capability.

    Usage:
        permission_classes = [IsAuthenticated, HasCapability]
        required_capability = CAP_PAYMENT_DELETE

    A view may also set `required_capabilities = {"GET": ..., "POST": ...}`
    to vary by HTTP method.
    """

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False

        per_method = getattr(view, "required_capabilities", None) or {}
        required = per_method.get(request.method) or getattr(
            view, "required_capability", None
        )
        if not required:
            # deny-by-default
            return False

        return required in effective_capabilities_for(request)


class IsAdmin(BaseRolePermission):
    allowed_roles = {ROLE_ADMIN}


class IsAdminOrBaseAgent(BaseRolePermission):
    allowed_roles = STAFF_ROLES
