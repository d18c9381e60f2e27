import pytest
from rest_framework.test import APIClient

from ovr_core.audit.models import AuditAction, AuditLog
from ovr_core.iam.models import RegistrationStatus, UserRegistration

pytestmark = pytest.mark.django_db

REGISTER_URL = "/api/auth/register/"


def _register(facility, email="new.nurse@example.com", **overrides):
    payload = {
        "email": email,
        "first_name": "New",
        "last_name": "Nurse",
        "facility_id": facility.id,
        "position": "Staff nurse",
        "password": "Secret123!",
    }
    payload.update(overrides)
    return APIClient().post(REGISTER_URL, payload, format="json")


def test_register_creates_pending_request(facility):
    res = _register(facility)
    assert res.status_code == 201, res.content
    assert res.json()["success"] is True

    reg = UserRegistration.objects.get(id=res.json()["registration_id"])
    assert reg.status == RegistrationStatus.PENDING
    assert reg.password != "Secret123!"


def test_duplicate_registration_conflicts(facility):
    _register(facility)
    res = _register(facility, email="NEW.nurse@example.com")
    assert res.status_code == 409


def test_register_with_existing_user_email_conflicts(facility, user):
    res = _register(facility, email=user.email)
    assert res.status_code == 409


def test_register_for_inactive_facility_is_400(inactive_facility):
    res = _register(inactive_facility)
    assert res.status_code == 400


def test_short_password_is_400(facility):
    res = _register(facility, password="short")
    assert res.status_code == 400
    assert "password" in res.json()["error"]["details"]


def test_review_queue_is_admin_only(api_client, admin_client, facility):
    _register(facility)

    assert api_client.get("/api/admin/registrations/").status_code == 403

    res = admin_client.get("/api/admin/registrations/?status=pending")
    assert res.status_code == 200
    assert res.json()["count"] == 1
    assert "password" not in res.json()["results"][0]


def test_approve_creates_user_who_can_log_in(admin_client, admin_user, facility):
    reg_id = _register(facility).json()["registration_id"]

    res = admin_client.post(f"/api/admin/registrations/{reg_id}/approve/", format="json")
    assert res.status_code == 200, res.content
    body = res.json()
    assert body["registration"]["status"] == "approved"
    assert body["registration"]["reviewed_by_id"] == admin_user.id
    assert body["user"]["facility_id"] == facility.id
    assert body["user"]["role"] == "user"

    login = APIClient().post(
        "/api/auth/login/", {"email": "new.nurse@example.com", "password": "Secret123!"}, format="json"
    )
    assert login.status_code == 200

    assert AuditLog.objects.filter(action=AuditAction.APPROVE_REGISTRATION, entity_id=str(reg_id)).exists()


def test_reject_requires_reason_and_is_final(admin_client, facility):
    reg_id = _register(facility).json()["registration_id"]
    url = f"/api/admin/registrations/{reg_id}/reject/"

    assert admin_client.post(url, {}, format="json").status_code == 400

    res = admin_client.post(url, {"reason": "Not on staff list"}, format="json")
    assert res.status_code == 200

    reg = UserRegistration.objects.get(id=reg_id)
    assert reg.status == RegistrationStatus.REJECTED
    assert reg.rejection_reason == "Not on staff list"

    again = admin_client.post(f"/api/admin/registrations/{reg_id}/approve/", format="json")
    assert again.status_code == 409
    assert again.json()["error"]["code"] == "conflict"


def test_unknown_registration_is_404(admin_client):
    res = admin_client.post("/api/admin/registrations/999/approve/", format="json")
    assert res.status_code == 404
