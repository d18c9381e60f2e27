# ovr_core/iam/services/accounts.py

from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from django.contrib.auth.hashers import check_password
from django.contrib.auth.models import update_last_login
from rest_framework import status
from rest_framework.exceptions import APIException, AuthenticationFailed

from ovr_core.iam.models import AuthProvider, RegistrationStatus, UserProfile, UserRegistration

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MSG = "Invalid email or password"
INVALID_LOGIN_METHOD_MSG = "Invalid login method"
ACCOUNT_INACTIVE_MSG = "Your account has been deactivated. Please contact admin."
REGISTRATION_REJECTED_MSG = "Your registration was rejected. Please contact admin for assistance."
REGISTRATION_PENDING_MSG = "Your registration is pending approval. Please wait for admin approval."


class LoginRefused(APIException):
    """
    403 for credentials that are correct but may not sign in yet (or anymore).
    The detail code tells the client which message it got.
    """
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Login refused."
    default_code = "login_refused"


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def find_user_by_email(email: str):
    User = get_user_model()
    email = normalize_email(email)
    return (
        User.objects.select_related("profile")
        .filter(username=email)
        .first()
        or User.objects.select_related("profile").filter(email__iexact=email).first()
    )


def create_account(
    *,
    email: str,
    first_name: str = "",
    last_name: str = "",
    role: str,
    facility_id: int | None,
    position: str = "",
    password_hash: str | None = None,
    raw_password: str | None = None,
    auth_provider: str = AuthProvider.LOCAL,
):
    """
    Auth user + profile in one go. Exactly one of password_hash / raw_password
    is expected for local accounts; neither leaves an unusable password.
    """
    User = get_user_model()
    email = normalize_email(email)

    user = User(
        username=email,
        email=email,
        first_name=first_name or "",
        last_name=last_name or "",
        is_active=True,
    )
    if password_hash:
        user.password = password_hash
    elif raw_password:
        user.set_password(raw_password)
    else:
        user.set_unusable_password()
    user.save()

    UserProfile.objects.create(
        user=user,
        role=role,
        facility_id=facility_id,
        position=position or "",
        is_approved=True,
        auth_provider=auth_provider,
    )
    return user


def _refuse_for_registration(registration: UserRegistration | None) -> None:
    if registration is None:
        return
    if registration.status == RegistrationStatus.PENDING:
        raise LoginRefused(REGISTRATION_PENDING_MSG, code="registration_pending")
    if registration.status == RegistrationStatus.REJECTED:
        raise LoginRefused(REGISTRATION_REJECTED_MSG, code="registration_rejected")


class AuthService:
    @staticmethod
    def login(*, email: str, password: str):
        """
        Local password login. Order of checks:
          - no account yet: a pending/rejected registration with a matching
            password gets its own message, anything else is invalid credentials
          - non-local account -> invalid login method
          - wrong password -> invalid credentials
          - inactive -> deactivated
        Updates last_login on success.
        """
        email = normalize_email(email)
        user = find_user_by_email(email)

        if user is None:
            registration = UserRegistration.objects.filter(email=email).first()
            if registration is not None and check_password(password, registration.password):
                _refuse_for_registration(registration)
            raise AuthenticationFailed(INVALID_CREDENTIALS_MSG, code="invalid_credentials")

        profile = getattr(user, "profile", None)
        if (profile is not None and profile.auth_provider != AuthProvider.LOCAL) or not user.has_usable_password():
            raise AuthenticationFailed(INVALID_LOGIN_METHOD_MSG, code="invalid_login_method")

        if not user.check_password(password):
            raise AuthenticationFailed(INVALID_CREDENTIALS_MSG, code="invalid_credentials")

        if not user.is_active:
            raise LoginRefused(ACCOUNT_INACTIVE_MSG, code="account_inactive")

        _refuse_for_registration(UserRegistration.objects.filter(email=email).first())

        update_last_login(None, user)
        logger.info("User %s logged in", user.id)
        return user
