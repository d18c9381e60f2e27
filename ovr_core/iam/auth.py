# ovr_core/iam/auth.py

from __future__ import annotations

from django.conf import settings
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication

from ovr_core.iam.principal import attach_principal


class CookieOrHeaderJWTAuthentication(JWTAuthentication):
    """
    Authenticate using:
      1) Authorization: Bearer <access>
      2) HttpOnly cookie containing access token

    Either way the acting Principal is resolved once and attached as
    request.principal before any view or permission runs.
    """

    def _cookie_token(self, request) -> str | None:
        cookie_name = settings.SIMPLE_JWT.get("AUTH_COOKIE", "ovr_access")
        return request.COOKIES.get(cookie_name) or None

    def authenticate(self, request):
        # 1) Prefer Authorization header
        header = self.get_header(request)
        if header:
            auth_result = super().authenticate(request)
            if auth_result is None:
                return None
            user, token = auth_result
        else:
            # 2) Cookie access token
            raw_token = self._cookie_token(request)
            if not raw_token:
                return None
            token = self.get_validated_token(raw_token)
            user = self.get_user(token)

        if attach_principal(request, user) is None:
            raise AuthenticationFailed("User account has no access profile.", code="no_profile")
        return user, token
