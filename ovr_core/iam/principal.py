# ovr_core/iam/principal.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from rest_framework.exceptions import NotAuthenticated

from ovr_core.iam.models import AuthProvider, UserRole


@dataclass(frozen=True)
class Principal:
    """
    The acting identity for one request, independent of how it authenticated.
    Authorization code only ever looks at this, never at the raw user row.
    """
    user_id: int
    email: str
    role: str
    facility_id: Optional[int]
    auth_provider: str

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def can_access_facility(self, facility_id) -> bool:
        if self.is_admin:
            return True
        return self.facility_id is not None and self.facility_id == facility_id


def resolve_principal(user) -> Principal | None:
    """
    Build a Principal from an authenticated auth user.

    Returns None for anonymous/inactive users and for accounts without a
    profile (superusers excepted: they act as admins).
    """
    if not user or not getattr(user, "is_authenticated", False):
        return None
    if not getattr(user, "is_active", False):
        return None

    profile = getattr(user, "profile", None)
    if profile is None:
        if getattr(user, "is_superuser", False):
            return Principal(
                user_id=user.id,
                email=user.email or user.get_username(),
                role=UserRole.ADMIN,
                facility_id=None,
                auth_provider=AuthProvider.LOCAL,
            )
        return None

    return Principal(
        user_id=user.id,
        email=user.email or user.get_username(),
        role=profile.role,
        facility_id=profile.facility_id,
        auth_provider=profile.auth_provider,
    )


def attach_principal(request, user) -> Principal | None:
    principal = resolve_principal(user)
    request.principal = principal
    return principal


def get_principal(request) -> Principal:
    """
    Principal attached by the authentication class, resolved lazily when the
    user was set some other way (session auth, force_authenticate in tests).
    """
    principal = getattr(request, "principal", None)
    if principal is None:
        principal = attach_principal(request, getattr(request, "user", None))
    if principal is None:
        raise NotAuthenticated("Authentication credentials were not provided.")
    return principal
