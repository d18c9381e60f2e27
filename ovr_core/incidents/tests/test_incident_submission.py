import pytest
from rest_framework.test import APIClient

from ovr_core.audit.models import AuditAction, AuditLog
from ovr_core.conftest import incident_payload
from ovr_core.incidents.models import Incident, IncidentPriority, IncidentStatus

pytestmark = pytest.mark.django_db

PUBLIC_URL = "/api/incidents/public/"


def test_public_submission_returns_ovr_id(facility, category):
    res = APIClient().post(PUBLIC_URL, incident_payload(facility), format="json")
    assert res.status_code == 201, res.content

    body = res.json()
    assert body["success"] is True
    assert body["ovr_id"].startswith("OVR-")
    assert body["message"]

    incident = Incident.objects.get(ovr_id=body["ovr_id"])
    assert incident.status == IncidentStatus.OPEN
    assert incident.priority == IncidentPriority.MEDIUM
    assert incident.reported_by_id is None
    assert incident.category_id == category.id
    assert incident.type_of_injury == ["bruise", "sprain"]
    assert incident.is_anonymous is False
    assert incident.contact_info == "reporter@example.com"


def test_public_submission_is_audited_without_actor(facility, category):
    res = APIClient().post(PUBLIC_URL, incident_payload(facility), format="json")
    incident = Incident.objects.get(ovr_id=res.json()["ovr_id"])

    entry = AuditLog.objects.get(action=AuditAction.CREATE_INCIDENT, entity_id=str(incident.id))
    assert entry.actor_id is None
    assert entry.details["anonymous_submission"] is True


def test_public_submission_ignores_priority_and_credentials(facility, category, user):
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION="Bearer not-a-real-token")

    res = client.post(PUBLIC_URL, incident_payload(facility, priority="high"), format="json")
    assert res.status_code == 201

    incident = Incident.objects.get(ovr_id=res.json()["ovr_id"])
    assert incident.priority == IncidentPriority.MEDIUM
    assert incident.reported_by_id is None


def test_reporter_without_name_or_email_is_anonymous(facility, category):
    payload = incident_payload(facility, reporter_name="", reporter_email="", reporter_mobile="0511111111")
    res = APIClient().post(PUBLIC_URL, payload, format="json")
    assert res.status_code == 201

    incident = Incident.objects.get(ovr_id=res.json()["ovr_id"])
    assert incident.is_anonymous is True
    assert incident.contact_info == "0511111111"


def test_unknown_category_falls_back_to_first_active(facility, category, other_category):
    res = APIClient().post(PUBLIC_URL, incident_payload(facility, category="no such thing"), format="json")
    assert res.status_code == 201
    assert Incident.objects.get(ovr_id=res.json()["ovr_id"]).category_id == category.id


def test_category_is_matched_case_insensitively(facility, category, other_category):
    res = APIClient().post(PUBLIC_URL, incident_payload(facility, category="FALLS"), format="json")
    assert Incident.objects.get(ovr_id=res.json()["ovr_id"]).category_id == other_category.id


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"description": "too short"}, "description"),
        ({"action_taken": "short"}, "action_taken"),
        ({"type_of_injury": []}, "type_of_injury"),
        ({"what_is_being_reported": "rumour"}, "what_is_being_reported"),
        ({"level_of_harm": "catastrophic"}, "level_of_harm"),
    ],
)
def test_invalid_form_is_rejected(facility, category, overrides, field):
    res = APIClient().post(PUBLIC_URL, incident_payload(facility, **overrides), format="json")
    assert res.status_code == 400
    body = res.json()
    assert body["error"]["code"] == "validation_error"
    assert field in body["error"]["details"]
    assert Incident.objects.count() == 0


def test_inactive_facility_is_rejected(inactive_facility, category):
    res = APIClient().post(PUBLIC_URL, incident_payload(inactive_facility), format="json")
    assert res.status_code == 400
    assert "facility_id" in res.json()["error"]["details"]


def test_authenticated_submission_records_reporter(api_client, user, facility, category):
    res = api_client.post("/api/incidents/", incident_payload(facility, priority="high"), format="json")
    assert res.status_code == 201, res.content

    body = res.json()
    assert body["reported_by"]["id"] == user.id
    assert body["facility"]["code"] == facility.code
    assert body["priority"] == "high"


def test_user_cannot_submit_for_another_facility(api_client, other_facility, category):
    res = api_client.post("/api/incidents/", incident_payload(other_facility), format="json")
    assert res.status_code == 403
    assert Incident.objects.count() == 0


def test_admin_can_submit_for_any_facility(admin_client, other_facility, category):
    res = admin_client.post("/api/incidents/", incident_payload(other_facility), format="json")
    assert res.status_code == 201
    assert res.json()["facility_id"] == other_facility.id
