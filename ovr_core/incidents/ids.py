# ovr_core/incidents/ids.py
from __future__ import annotations

import re
from datetime import datetime

from django.db import IntegrityError, transaction
from django.utils import timezone

from ovr_core.incidents.models import Incident, OvrSequence

OVR_ID_RE = re.compile(r"^OVR-(\d{4})-(\d{4,})$")


def bucket_for(moment: datetime | None = None) -> str:
    """YYMM of `moment` in the configured local time zone."""
    moment = moment or timezone.now()
    if timezone.is_aware(moment):
        moment = timezone.localtime(moment)
    return moment.strftime("%y%m")


def format_ovr_id(bucket: str, value: int) -> str:
    return f"OVR-{bucket}-{value:04d}"


def _highest_issued(bucket: str) -> int:
    """
    Largest sequence already used in `bucket`. Only consulted when the counter
    row is first created, so incidents imported before the counter existed
    are never re-numbered.
    """
    highest = 0
    for ovr_id in Incident.objects.filter(ovr_id__startswith=f"OVR-{bucket}-").values_list("ovr_id", flat=True):
        m = OVR_ID_RE.match(ovr_id)
        if m:
            highest = max(highest, int(m.group(2)))
    return highest


def _locked_sequence(bucket: str) -> OvrSequence:
    seq = OvrSequence.objects.select_for_update().filter(bucket=bucket).first()
    if seq is not None:
        return seq

    try:
        # Savepoint: a concurrent creator makes this insert fail, not the caller's transaction.
        with transaction.atomic():
            return OvrSequence.objects.create(bucket=bucket, last_value=_highest_issued(bucket))
    except IntegrityError:
        return OvrSequence.objects.select_for_update().get(bucket=bucket)


@transaction.atomic
def next_ovr_id(*, at: datetime | None = None) -> str:
    """
    Allocate the next OVR id for the bucket of `at` (default: now).

    Must run inside the transaction that inserts the incident so the counter
    and the row commit together.
    """
    bucket = bucket_for(at)
    seq = _locked_sequence(bucket)

    seq.last_value += 1
    seq.save(update_fields=["last_value", "updated_at"])
    return format_ovr_id(bucket, seq.last_value)
