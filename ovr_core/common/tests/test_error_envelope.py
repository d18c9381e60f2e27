import pytest
from rest_framework.test import APIClient

pytestmark = pytest.mark.django_db


def test_health(client):
    res = client.get("/health/")
    assert res.status_code == 200
    assert res.json() == {"status": "ok"}


def test_error_envelope_carries_request_id(api_client):
    res = api_client.get("/api/incidents/999999/")
    assert res.status_code == 404

    error = res.json()["error"]
    assert error["code"] == "not_found"
    assert error["message"] == "Incident not found."
    assert error["details"] is None
    assert error["request_id"] == res["X-Request-Id"]


def test_incoming_request_id_is_echoed(api_client):
    res = api_client.get("/api/incidents/999999/", HTTP_X_REQUEST_ID="trace-abc.123")
    assert res["X-Request-Id"] == "trace-abc.123"
    assert res.json()["error"]["request_id"] == "trace-abc.123"


def test_unsafe_request_id_is_replaced(api_client):
    res = api_client.get("/api/incidents/", HTTP_X_REQUEST_ID="bad id with spaces")
    assert res.status_code == 200
    assert res["X-Request-Id"] != "bad id with spaces"
    assert len(res["X-Request-Id"]) == 32


def test_validation_errors_keep_field_details(facility):
    res = APIClient().post("/api/incidents/public/", {"facility_id": facility.id}, format="json")
    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "validation_error"
    assert error["message"] == "Request failed."
    assert "description" in error["details"]


def test_unhandled_errors_become_500_envelope(api_client, monkeypatch):
    from ovr_core.incidents.api import views

    def explode(**kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(views, "incident_metrics", explode)
    api_client.raise_request_exception = False

    res = api_client.get("/api/incidents/metrics/")
    assert res.status_code == 500
    assert res.json()["error"]["code"] == "server_error"
