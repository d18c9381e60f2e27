import pytest

from ovr_core.comments.models import Comment
from ovr_core.incidents.models import Incident, IncidentStatus

pytestmark = pytest.mark.django_db


def _ids(res):
    return {row["id"] for row in res.json()["results"]}


# -------------------------
# Reads
# -------------------------
def test_list_requires_auth(client):
    res = client.get("/api/incidents/")
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "not_authenticated"


def test_user_only_sees_own_facility(api_client, make_incident, facility, other_facility, user, other_user):
    mine = make_incident(facility, reporter=user)
    theirs = make_incident(other_facility, reporter=other_user)

    res = api_client.get("/api/incidents/")
    assert res.status_code == 200
    assert _ids(res) == {mine.id}

    # facility_id cannot widen a user's scope
    res = api_client.get(f"/api/incidents/?facility_id={other_facility.id}")
    assert _ids(res) == {mine.id}
    assert theirs.id not in _ids(res)


def test_admin_sees_all_and_filters(admin_client, make_incident, facility, other_facility, user, other_user):
    a = make_incident(facility, reporter=user)
    b = make_incident(other_facility, reporter=other_user, description="Wrong medication dose was given.")
    Incident.objects.filter(id=b.id).update(status=IncidentStatus.IN_REVIEW, is_flagged=True)

    assert _ids(admin_client.get("/api/incidents/")) == {a.id, b.id}
    assert _ids(admin_client.get("/api/incidents/?status=all")) == {a.id, b.id}
    assert _ids(admin_client.get("/api/incidents/?status=in_review")) == {b.id}
    assert _ids(admin_client.get(f"/api/incidents/?facility_id={facility.id}")) == {a.id}
    assert _ids(admin_client.get("/api/incidents/?facility_id=all")) == {a.id, b.id}
    assert _ids(admin_client.get("/api/incidents/?is_flagged=true")) == {b.id}
    assert _ids(admin_client.get("/api/incidents/?search=medication")) == {b.id}
    assert _ids(admin_client.get(f"/api/incidents/?search={a.ovr_id}")) == {a.id}


def test_list_filters_by_incident_date(admin_client, make_incident, facility, user):
    early = make_incident(facility, reporter=user, incident_date="2025-01-02")
    late = make_incident(facility, reporter=user, incident_date="2025-01-20")

    res = admin_client.get("/api/incidents/?date_from=2025-01-10")
    assert _ids(res) == {late.id}

    res = admin_client.get("/api/incidents/?date_to=2025-01-02")
    assert _ids(res) == {early.id}


def test_list_is_newest_first_and_paginated(admin_client, make_incident, facility, user):
    made = [make_incident(facility, reporter=user) for _ in range(3)]

    res = admin_client.get("/api/incidents/?page_size=2")
    body = res.json()
    assert body["count"] == 3
    assert [row["id"] for row in body["results"]] == [made[2].id, made[1].id]
    assert body["next"]


def test_invalid_status_filter_is_a_validation_error(admin_client):
    res = admin_client.get("/api/incidents/?status=bogus")
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "validation_error"


def test_retrieve_scoping(api_client, other_client, incident):
    res = api_client.get(f"/api/incidents/{incident.id}/")
    assert res.status_code == 200
    assert res.json()["ovr_id"] == incident.ovr_id
    assert res.json()["category"]["name"] == "Patient Safety"

    res = other_client.get(f"/api/incidents/{incident.id}/")
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "permission_denied"

    res = other_client.get("/api/incidents/999999/")
    assert res.status_code == 404


def test_metrics(admin_client, api_client, make_incident, facility, other_facility, user, other_user):
    a = make_incident(facility, reporter=user, priority="high")
    make_incident(facility, reporter=user)
    b = make_incident(other_facility, reporter=other_user)
    Incident.objects.filter(id=a.id).update(status=IncidentStatus.PENDING_CLOSURE, is_flagged=True)
    Incident.objects.filter(id=b.id).update(status=IncidentStatus.CLOSED)

    body = admin_client.get("/api/incidents/metrics/").json()
    assert body == {
        "total": 3,
        "open": 1,
        "in_review": 0,
        "pending_closure": 1,
        "closed": 1,
        "high_priority": 1,
        "flagged": 1,
        "active_facilities": 2,
    }

    body = api_client.get("/api/incidents/metrics/").json()
    assert body["total"] == 2
    assert body["closed"] == 0
    assert body["active_facilities"] == 1


# -------------------------
# Writes
# -------------------------
def test_patch_status_and_flag(api_client, incident):
    res = api_client.patch(f"/api/incidents/{incident.id}/", {"status": "in_review", "is_flagged": True}, format="json")
    assert res.status_code == 200, res.content
    assert res.json()["status"] == "in_review"
    assert res.json()["is_flagged"] is True


def test_patch_close_by_user_is_400(api_client, incident):
    res = api_client.patch(f"/api/incidents/{incident.id}/", {"status": "closed"}, format="json")
    assert res.status_code == 400


def test_patch_illegal_edge_is_409(api_client, incident):
    res = api_client.patch(f"/api/incidents/{incident.id}/", {"status": "pending_closure"}, format="json")
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "conflict"


@pytest.mark.parametrize("target", ["closed", "in_review"])
def test_admin_patch_on_pending_incident_is_409(api_client, admin_client, incident, target):
    api_client.post(f"/api/incidents/{incident.id}/request-closure/", {"reason": "resolved"}, format="json")

    res = admin_client.patch(f"/api/incidents/{incident.id}/", {"status": target}, format="json")
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "conflict"

    res = admin_client.get(f"/api/incidents/{incident.id}/")
    assert res.json()["status"] == "pending_closure"
    assert res.json()["closure_approved_by"] is None


def test_admin_patch_to_pending_closure_is_409(admin_client, incident):
    res = admin_client.patch(f"/api/incidents/{incident.id}/", {"status": "pending_closure"}, format="json")
    assert res.status_code == 409

    res = admin_client.get(f"/api/incidents/{incident.id}/")
    assert res.json()["status"] == "open"
    assert res.json()["closure_reason"] == ""


@pytest.mark.parametrize(
    "method, suffix, body",
    [
        ("patch", "", {"status": "bogus"}),
        ("patch", "edit/", {"field": "ovr_category", "value": "x"}),
        ("post", "request-closure/", {}),
        ("post", "comments/", {"content": ""}),
    ],
)
def test_other_facility_always_gets_403(other_client, incident, method, suffix, body):
    res = getattr(other_client, method)(f"/api/incidents/{incident.id}/{suffix}", body, format="json")
    assert res.status_code == 403


def test_closure_flow_over_http(api_client, admin_client, incident):
    res = api_client.post(f"/api/incidents/{incident.id}/request-closure/", {"reason": "resolved"}, format="json")
    assert res.status_code == 200
    assert res.json()["status"] == "pending_closure"

    res = api_client.post(f"/api/incidents/{incident.id}/approve-closure/", format="json")
    assert res.status_code == 403

    res = admin_client.post(f"/api/incidents/{incident.id}/approve-closure/", format="json")
    assert res.status_code == 200
    assert res.json()["status"] == "closed"
    assert res.json()["closure_approved_by"]["email"] == "admin@example.com"

    res = admin_client.post(f"/api/incidents/{incident.id}/approve-closure/", format="json")
    assert res.status_code == 409


def test_reject_closure_over_http(api_client, admin_client, incident):
    api_client.post(f"/api/incidents/{incident.id}/request-closure/", {"reason": "resolved"}, format="json")

    res = admin_client.post(f"/api/incidents/{incident.id}/reject-closure/", {}, format="json")
    assert res.status_code == 400

    res = admin_client.post(
        f"/api/incidents/{incident.id}/reject-closure/",
        {"reason": "insufficient evidence"},
        format="json",
    )
    assert res.status_code == 200
    assert res.json()["status"] == "in_review"
    assert res.json()["closure_requested_by"] is None


def test_edit_endpoint(api_client, incident):
    url = f"/api/incidents/{incident.id}/edit/"

    res = api_client.patch(url, {"field": "ovr_category", "value": "Medication Error"}, format="json")
    assert res.status_code == 400
    assert "comment" in res.json()["error"]["details"]

    res = api_client.patch(
        url,
        {"field": "ovr_category", "value": "Medication Error", "comment": "Wrong drug given"},
        format="json",
    )
    assert res.status_code == 200
    assert res.json()["ovr_category"] == "Medication Error"


def test_delete_is_admin_only(api_client, admin_client, incident):
    res = api_client.delete(f"/api/incidents/{incident.id}/")
    assert res.status_code == 403

    res = admin_client.delete(f"/api/incidents/{incident.id}/")
    assert res.status_code == 204
    assert not Incident.objects.filter(id=incident.id).exists()


# -------------------------
# Comments
# -------------------------
def test_comments_are_listed_oldest_first(api_client, incident, user):
    url = f"/api/incidents/{incident.id}/comments/"

    assert api_client.post(url, {"content": "  first  "}, format="json").status_code == 201
    assert api_client.post(url, {"content": "second"}, format="json").status_code == 201

    res = api_client.get(url)
    assert res.status_code == 200
    rows = res.json()
    assert [r["content"] for r in rows] == ["first", "second"]
    assert rows[0]["author_email"] == user.email
    assert rows[0]["kind"] == "comment"


def test_blank_comment_is_rejected(api_client, incident):
    res = api_client.post(f"/api/incidents/{incident.id}/comments/", {"content": "   "}, format="json")
    assert res.status_code == 400
    assert not Comment.objects.filter(incident=incident).exists()
