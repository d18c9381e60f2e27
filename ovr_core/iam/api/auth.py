# ovr_core/iam/api/auth.py

from __future__ import annotations

from datetime import timedelta
from typing import Any

from django.conf import settings
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.exceptions import NotAuthenticated
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.serializers import TokenRefreshSerializer
from rest_framework_simplejwt.tokens import RefreshToken

from ovr_core.iam.api.serializers import (
    DetailResponseSerializer,
    LoginRequestSerializer,
    RegisterRequestSerializer,
    RegisterResponseSerializer,
    UserSerializer,
)
from ovr_core.iam.services.accounts import AuthService
from ovr_core.iam.services.registration import RegistrationService


def _seconds(value: Any) -> int:
    """
    Convert a JWT lifetime setting into seconds.
    Supports timedelta OR int/float (already seconds).
    """
    if isinstance(value, timedelta):
        return int(value.total_seconds())
    try:
        return int(value)
    except (TypeError, ValueError):
        # 0 means "session cookie"
        return 0


def _set_auth_cookies(response: Response, *, access: str, refresh: str) -> None:
    jwt_cfg = getattr(settings, "SIMPLE_JWT", {}) or {}

    access_name = jwt_cfg.get("AUTH_COOKIE", "ovr_access")
    refresh_name = jwt_cfg.get("AUTH_COOKIE_REFRESH", "ovr_refresh")

    access_lifetime = _seconds(jwt_cfg.get("ACCESS_TOKEN_LIFETIME", timedelta(minutes=30)))
    refresh_lifetime = _seconds(jwt_cfg.get("REFRESH_TOKEN_LIFETIME", timedelta(days=7)))

    secure = bool(jwt_cfg.get("AUTH_COOKIE_SECURE", False))
    samesite = jwt_cfg.get("AUTH_COOKIE_SAMESITE", "Lax")

    for name, value, max_age in (
        (access_name, access, access_lifetime),
        (refresh_name, refresh, refresh_lifetime),
    ):
        response.set_cookie(
            name,
            value,
            max_age=max_age,
            httponly=True,
            secure=secure,
            samesite=samesite,
            path="/",
        )


def _clear_auth_cookies(response: Response) -> None:
    jwt_cfg = getattr(settings, "SIMPLE_JWT", {}) or {}
    response.delete_cookie(jwt_cfg.get("AUTH_COOKIE", "ovr_access"), path="/")
    response.delete_cookie(jwt_cfg.get("AUTH_COOKIE_REFRESH", "ovr_refresh"), path="/")


class PublicAuthView(APIView):
    """
    Credential endpoints ignore whatever (possibly stale) token the client
    still carries, but keep answering 401 rather than 403 on bad credentials.
    """
    permission_classes = [AllowAny]
    authentication_classes: list = []

    def get_authenticate_header(self, request):
        return 'Bearer realm="api"'


class RegisterView(PublicAuthView):
    @extend_schema(
        request=RegisterRequestSerializer,
        responses={201: RegisterResponseSerializer},
        tags=["IAM"],
    )
    def post(self, request):
        s = RegisterRequestSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        d = s.validated_data

        registration = RegistrationService.submit(
            email=d["email"],
            first_name=d["first_name"],
            last_name=d["last_name"],
            facility_id=d["facility_id"],
            position=d.get("position") or "",
            password=d["password"],
        )
        return Response(
            {
                "success": True,
                "message": "Registration request submitted successfully. Please wait for admin approval.",
                "registration_id": registration.id,
            },
            status=status.HTTP_201_CREATED,
        )


class LoginView(PublicAuthView):
    @extend_schema(
        request=LoginRequestSerializer,
        responses={200: UserSerializer},
        tags=["IAM"],
    )
    def post(self, request):
        s = LoginRequestSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        user = AuthService.login(email=s.validated_data["email"], password=s.validated_data["password"])

        refresh = RefreshToken.for_user(user)
        access = str(refresh.access_token)

        res = Response(
            {
                "success": True,
                "user": UserSerializer(user).data,
                "access": access,
                "refresh": str(refresh),
            },
            status=status.HTTP_200_OK,
        )
        _set_auth_cookies(res, access=access, refresh=str(refresh))
        return res


class RefreshView(PublicAuthView):
    @extend_schema(
        request=None,
        responses={200: DetailResponseSerializer},
        tags=["IAM"],
    )
    def post(self, request):
        jwt_cfg = getattr(settings, "SIMPLE_JWT", {}) or {}
        refresh_cookie_name = jwt_cfg.get("AUTH_COOKIE_REFRESH", "ovr_refresh")
        refresh = request.COOKIES.get(refresh_cookie_name) or request.data.get("refresh")
        if not refresh:
            raise NotAuthenticated("Refresh token missing.")

        serializer = TokenRefreshSerializer(data={"refresh": refresh})
        serializer.is_valid(raise_exception=True)

        access = serializer.validated_data["access"]
        new_refresh = serializer.validated_data.get("refresh", refresh)

        res = Response({"detail": "refreshed", "access": access}, status=status.HTTP_200_OK)
        _set_auth_cookies(res, access=access, refresh=new_refresh)
        return res


class LogoutView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        request=None,
        responses={200: DetailResponseSerializer},
        tags=["IAM"],
    )
    def post(self, request):
        res = Response({"detail": "logged out"}, status=status.HTTP_200_OK)
        _clear_auth_cookies(res)
        return res
