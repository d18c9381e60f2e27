import datetime
import re

import pytest
from django.utils import timezone

from ovr_core.incidents.ids import bucket_for, format_ovr_id, next_ovr_id
from ovr_core.incidents.models import Incident, OvrSequence

pytestmark = pytest.mark.django_db


def _at(year, month, day=15):
    return timezone.make_aware(datetime.datetime(year, month, day, 12, 0))


def test_ids_are_sequential_within_a_month():
    assert next_ovr_id(at=_at(2025, 1)) == "OVR-2501-0001"
    assert next_ovr_id(at=_at(2025, 1, 20)) == "OVR-2501-0002"
    assert next_ovr_id(at=_at(2025, 1, 31)) == "OVR-2501-0003"

    seq = OvrSequence.objects.get(bucket="2501")
    assert seq.last_value == 3


def test_new_month_starts_a_new_sequence():
    next_ovr_id(at=_at(2025, 1))
    next_ovr_id(at=_at(2025, 1))

    assert next_ovr_id(at=_at(2025, 2)) == "OVR-2502-0001"
    assert OvrSequence.objects.filter(bucket__in=["2501", "2502"]).count() == 2


def test_counter_continues_after_ids_issued_before_it_existed(make_incident, facility):
    existing = make_incident(facility)
    Incident.objects.filter(id=existing.id).update(ovr_id="OVR-2503-0007")

    assert next_ovr_id(at=_at(2025, 3)) == "OVR-2503-0008"


def test_bucket_uses_local_time(settings):
    settings.TIME_ZONE = "Asia/Riyadh"
    # 22:30 UTC on Jan 31st is already Feb 1st in Riyadh (UTC+3)
    moment = datetime.datetime(2025, 1, 31, 22, 30, tzinfo=datetime.timezone.utc)
    assert bucket_for(moment) == "2502"


def test_sequence_widens_instead_of_wrapping():
    assert format_ovr_id("2501", 42) == "OVR-2501-0042"
    assert format_ovr_id("2501", 10000) == "OVR-2501-10000"


def test_submitted_incidents_get_consecutive_ids(make_incident, facility, admin_user):
    first = make_incident(facility, reporter=admin_user)
    second = make_incident(facility, reporter=admin_user)

    bucket = bucket_for()
    assert re.match(r"^OVR-\d{4}-\d{4}$", first.ovr_id)
    assert first.ovr_id == f"OVR-{bucket}-0001"
    assert second.ovr_id == f"OVR-{bucket}-0002"
