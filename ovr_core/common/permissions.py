# ovr_core/common/permissions.py
from __future__ import annotations

from typing import Set

from rest_framework.permissions import BasePermission

from ovr_core.iam.models import UserRole
from ovr_core.iam.principal import Principal, resolve_principal

ROLE_ADMIN = UserRole.ADMIN.value
ROLE_USER = UserRole.USER.value

ALL_ROLES = {ROLE_ADMIN, ROLE_USER}


def _principal(request) -> Principal | None:
    principal = getattr(request, "principal", None)
    if principal is None:
        principal = resolve_principal(getattr(request, "user", None))
        if principal is not None:
            request.principal = principal
    return principal


def _user_roles(request) -> Set[str]:
    """
    Roles of the acting principal. Empty for anonymous callers and for
    users without an access profile.
    """
    principal = _principal(request)
    if principal is None:
        return set()
    return {principal.role}


class BaseRolePermission(BasePermission):
    """
    Base permission class for role-based access control.

    Key behavior:
    - Requires an authenticated principal.
    - ADMIN bypass.
    - Uses allowed_roles_per_action for strict RBAC.
    - Unknown action => deny.
    - Actions in public_actions skip the role check (anonymous included).

    Facility scoping is object-level and enforced by selectors/services,
    which raise NotFound before PermissionDenied.
    """

    message = "You do not have permission to perform this action."

    public_actions: Set[str] = set()

    # Override in subclasses: dict of action -> set of allowed roles
    allowed_roles_per_action = {
        "list": ALL_ROLES,
        "retrieve": ALL_ROLES,
        "create": {ROLE_ADMIN},
        "update": {ROLE_ADMIN},
        "partial_update": {ROLE_ADMIN},
        "destroy": {ROLE_ADMIN},
    }

    def _infer_action(self, request, view) -> str | None:
        action = getattr(view, "action", None)
        if action:
            return action

        # fallback inference for plain APIViews
        kwargs = getattr(view, "kwargs", {}) or {}
        is_detail = "pk" in kwargs or "id" in kwargs
        method = request.method.upper()

        if method in ("GET", "HEAD", "OPTIONS"):
            return "retrieve" if is_detail else "list"
        if method == "POST":
            return "create"
        if method == "PUT":
            return "update"
        if method == "PATCH":
            return "partial_update"
        if method == "DELETE":
            return "destroy"
        return None

    def has_permission(self, request, view) -> bool:
        if self._infer_action(request, view) in self.public_actions:
            return True

        roles = _user_roles(request)
        if not roles:
            return False

        if ROLE_ADMIN in roles:
            return True

        action = self._infer_action(request, view)
        allowed = self.allowed_roles_per_action.get(action)
        if allowed is not None:
            return bool(roles & allowed)

        return False


class AdminOnlyPermission(BaseRolePermission):
    """User administration, registration review and the audit trail."""

    message = "Access denied. Admin privileges required."
    allowed_roles_per_action: dict = {}
