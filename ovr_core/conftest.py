# ovr_core/conftest.py
import datetime

import pytest
from rest_framework.test import APIClient

from ovr_core.categories.models import Category
from ovr_core.facilities.models import Facility
from ovr_core.iam.models import UserRole
from ovr_core.iam.principal import resolve_principal
from ovr_core.iam.services.accounts import create_account

PASSWORD = "Pass@12345"


def principal_of(user):
    return resolve_principal(user)


def incident_payload(facility, **overrides):
    """
    A complete, valid submission for the reporting form.
    """
    payload = {
        "facility_id": facility.id,
        "category": "Patient Safety",
        "incident_date": "2025-01-14",
        "incident_time": "09:30",
        "description": "Patient slipped near the nursing station.",
        "reporting_department": "Nursing",
        "responding_department": "Facilities",
        "patient_name": "Test Patient",
        "medical_record": "MRN-0001",
        "what_is_being_reported": "incident",
        "ovr_category": "Falls",
        "type_of_injury": ["bruise", "bruise", "sprain"],
        "level_of_harm": "low",
        "likelihood_category": "possible",
        "action_taken": "Area cleaned and patient assessed by physician.",
        "reporter_name": "Nurse Reporter",
        "reporter_email": "reporter@example.com",
        "reporter_mobile": "0500000000",
        "reporter_position": "Staff nurse",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def facility(db):
    return Facility.objects.create(name_en="Ad Diriyah Hospital", code="ADH")


@pytest.fixture
def other_facility(db):
    return Facility.objects.create(name_en="Al Yamamah Hospital", code="AYH")


@pytest.fixture
def inactive_facility(db):
    return Facility.objects.create(name_en="Closed Wing", code="CLW", is_active=False)


@pytest.fixture
def category(db):
    return Category.objects.create(name="Patient Safety", description="Incidents related to patient safety and care")


@pytest.fixture
def other_category(db):
    return Category.objects.create(name="Falls", description="Patient or staff falls and related injuries")


@pytest.fixture
def admin_user(db, facility):
    return create_account(
        email="admin@example.com",
        first_name="System",
        last_name="Administrator",
        role=UserRole.ADMIN,
        facility_id=facility.id,
        raw_password=PASSWORD,
    )


@pytest.fixture
def user(db, facility):
    """Facility user of `facility`."""
    return create_account(
        email="nurse@example.com",
        first_name="Noura",
        last_name="Nurse",
        role=UserRole.USER,
        facility_id=facility.id,
        position="Staff nurse",
        raw_password=PASSWORD,
    )


@pytest.fixture
def other_user(db, other_facility):
    """Facility user of `other_facility`."""
    return create_account(
        email="other@example.com",
        first_name="Omar",
        last_name="Other",
        role=UserRole.USER,
        facility_id=other_facility.id,
        raw_password=PASSWORD,
    )


@pytest.fixture
def admin_client(admin_user):
    c = APIClient()
    c.force_authenticate(user=admin_user)
    return c


@pytest.fixture
def api_client(user):
    c = APIClient()
    c.force_authenticate(user=user)
    return c


@pytest.fixture
def other_client(other_user):
    c = APIClient()
    c.force_authenticate(user=other_user)
    return c


@pytest.fixture
def make_incident(db, category):
    """
    Submit incidents through the service so ids, audit and defaults match
    real submissions.
    """
    from ovr_core.incidents.services import IncidentService, IncidentSubmission

    def _make(facility, *, reporter=None, **overrides):
        data = incident_payload(facility, **overrides)
        data["incident_date"] = datetime.date.fromisoformat(data["incident_date"])
        data["incident_time"] = datetime.time.fromisoformat(data["incident_time"])
        return IncidentService.submit(
            data=IncidentSubmission(**data),
            principal=principal_of(reporter) if reporter is not None else None,
            actor=reporter,
        )

    return _make


@pytest.fixture
def incident(make_incident, facility, user):
    return make_incident(facility, reporter=user)
