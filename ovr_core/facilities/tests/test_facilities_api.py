import pytest
from rest_framework.test import APIClient

from ovr_core.audit.models import AuditAction, AuditLog

pytestmark = pytest.mark.django_db


def test_facilities_are_public_and_sorted(facility, other_facility, inactive_facility):
    res = APIClient().get("/api/facilities/")
    assert res.status_code == 200
    assert [row["code"] for row in res.json()] == ["ADH", "AYH"]

    res = APIClient().get("/api/facilities/?active_only=0")
    assert {row["code"] for row in res.json()} == {"ADH", "AYH", "CLW"}


def test_facility_retrieve(facility):
    res = APIClient().get(f"/api/facilities/{facility.id}/")
    assert res.status_code == 200
    assert res.json()["name_en"] == "Ad Diriyah Hospital"

    assert APIClient().get("/api/facilities/9999/").status_code == 404


def test_activation_toggle_is_admin_only(api_client, admin_client, other_facility):
    url = f"/api/facilities/{other_facility.id}/"

    assert APIClient().patch(url, {"is_active": False}, format="json").status_code == 401

    res = api_client.patch(url, {"is_active": False}, format="json")
    assert res.status_code == 403
    assert res.json()["error"]["message"] == "Only admins can update facilities."
    other_facility.refresh_from_db()
    assert other_facility.is_active is True

    res = admin_client.patch(url, {"is_active": False}, format="json")
    assert res.status_code == 200
    assert res.json()["is_active"] is False
    assert AuditLog.objects.filter(action=AuditAction.UPDATE_FACILITY, entity_id=str(other_facility.id)).exists()

