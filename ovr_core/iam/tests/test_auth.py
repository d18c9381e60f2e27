# ovr_core/iam/tests/test_auth.py
import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from ovr_core.conftest import PASSWORD
from ovr_core.iam.services.registration import RegistrationService

pytestmark = pytest.mark.django_db


def _login(email, password=PASSWORD):
    return APIClient().post("/api/auth/login/", {"email": email, "password": password}, format="json")


def test_login_sets_cookies_and_returns_user(user, settings):
    res = _login("Nurse@Example.com")
    assert res.status_code == 200, res.content

    body = res.json()
    assert body["success"] is True
    assert body["user"]["email"] == user.email
    assert body["user"]["role"] == "user"
    assert body["access"] and body["refresh"]

    assert settings.SIMPLE_JWT["AUTH_COOKIE"] in res.cookies
    assert settings.SIMPLE_JWT["AUTH_COOKIE_REFRESH"] in res.cookies

    user.refresh_from_db()
    assert user.last_login is not None


def test_wrong_password_is_401(user):
    res = _login(user.email, "nope-nope")
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "invalid_credentials"


def test_unknown_email_is_401():
    res = _login("ghost@example.com")
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "invalid_credentials"


def test_inactive_account_is_refused(user):
    user.is_active = False
    user.save(update_fields=["is_active"])

    res = _login(user.email)
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "account_inactive"


def test_external_account_cannot_use_password_login(user):
    user.profile.auth_provider = "external"
    user.profile.save(update_fields=["auth_provider"])

    res = _login(user.email)
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "invalid_login_method"


def test_login_before_review_says_pending(facility):
    RegistrationService.submit(
        email="x@y.com",
        first_name="X",
        last_name="Y",
        facility_id=facility.id,
        password="Secret123!",
    )

    res = _login("x@y.com", "Secret123!")
    assert res.status_code == 403
    error = res.json()["error"]
    assert error["code"] == "registration_pending"
    assert "pending approval" in error["message"]


def test_pending_registration_with_wrong_password_is_generic(facility):
    RegistrationService.submit(
        email="x@y.com", first_name="X", last_name="Y", facility_id=facility.id, password="Secret123!"
    )
    res = _login("x@y.com", "guess-guess")
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "invalid_credentials"


def test_rejected_registration_says_rejected(facility, admin_user):
    reg = RegistrationService.submit(
        email="x@y.com", first_name="X", last_name="Y", facility_id=facility.id, password="Secret123!"
    )
    RegistrationService.reject(registration_id=reg.id, actor=admin_user, reason="Unknown employee")

    res = _login("x@y.com", "Secret123!")
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "registration_rejected"


def test_me_requires_auth():
    res = APIClient().get("/api/auth/user/")
    assert res.status_code == 401


def test_me_with_bearer_token(user, facility):
    """
    Real JWT so CookieOrHeaderJWTAuthentication runs (force_authenticate bypasses it).
    """
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {RefreshToken.for_user(user).access_token}")

    res = client.get("/api/auth/user/")
    assert res.status_code == 200
    body = res.json()
    assert body["id"] == user.id
    assert body["facility_id"] == facility.id
    assert body["facility"]["code"] == facility.code


def test_me_with_access_cookie(user, settings):
    client = APIClient()
    client.cookies[settings.SIMPLE_JWT["AUTH_COOKIE"]] = str(RefreshToken.for_user(user).access_token)

    res = client.get("/api/auth/user/")
    assert res.status_code == 200
    assert res.json()["email"] == user.email


def test_token_for_user_without_profile_is_rejected(django_user_model):
    bare = django_user_model.objects.create_user(username="bare", email="bare@example.com", password=PASSWORD)
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {RefreshToken.for_user(bare).access_token}")

    res = client.get("/api/auth/user/")
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "no_profile"


def test_refresh_from_cookie(user, settings):
    client = APIClient()
    client.cookies[settings.SIMPLE_JWT["AUTH_COOKIE_REFRESH"]] = str(RefreshToken.for_user(user))

    res = client.post("/api/auth/refresh/", format="json")
    assert res.status_code == 200
    assert res.json()["access"]


def test_refresh_without_token_is_401():
    res = APIClient().post("/api/auth/refresh/", format="json")
    assert res.status_code == 401


def test_logout_clears_cookies(api_client, settings):
    res = api_client.post("/api/auth/logout/", format="json")
    assert res.status_code == 200
    cookie = res.cookies[settings.SIMPLE_JWT["AUTH_COOKIE"]]
    assert cookie.value == ""
