# ovr_core/facilities/selectors.py
from __future__ import annotations

from django.db.models import QuerySet
from rest_framework.exceptions import NotFound

from ovr_core.facilities.models import Facility


def list_facilities(*, active_only: bool = True) -> QuerySet[Facility]:
    qs = Facility.objects.all()
    if active_only:
        qs = qs.filter(is_active=True)
    return qs.order_by("name_en")


def facility_by_id(*, facility_id: int) -> Facility:
    try:
        return Facility.objects.get(id=facility_id)
    except (Facility.DoesNotExist, ValueError, TypeError):
        raise NotFound("Facility not found.")
