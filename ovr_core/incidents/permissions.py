# ovr_core/incidents/permissions.py
from __future__ import annotations

from ovr_core.common.permissions import ALL_ROLES, BaseRolePermission


class IncidentPermission(BaseRolePermission):
    """
    Any signed-in principal works incidents of their own facility (enforced
    in selectors/services). Deletion and closure decisions are admin-only.
    """

    allowed_roles_per_action = {
        "list": ALL_ROLES,
        "retrieve": ALL_ROLES,
        "create": ALL_ROLES,
        "partial_update": ALL_ROLES,
        "metrics": ALL_ROLES,
        "comments": ALL_ROLES,
        "edit": ALL_ROLES,
        "request_closure": ALL_ROLES,
        # admin only: destroy, approve_closure, reject_closure
    }
