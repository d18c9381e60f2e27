# ovr_core/facilities/api/permissions.py
from __future__ import annotations

from ovr_core.common.permissions import BaseRolePermission


class FacilityPermission(BaseRolePermission):
    """
    Reads are public: the anonymous reporting form lists facilities.
    The activation toggle is ADMIN only.
    """

    message = "Only admins can update facilities."
    public_actions = {"list", "retrieve"}
    allowed_roles_per_action: dict = {}
