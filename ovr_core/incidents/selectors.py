# ovr_core/incidents/selectors.py
from __future__ import annotations

from django.db.models import Count, Q, QuerySet
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from ovr_core.facilities.models import Facility
from ovr_core.iam.principal import Principal
from ovr_core.incidents.filters import IncidentFilter
from ovr_core.incidents.models import Incident, IncidentPriority, IncidentStatus

FACILITY_FORBIDDEN_MSG = "Access denied. You can only access incidents from your facility."


def _base_queryset() -> QuerySet[Incident]:
    return Incident.objects.select_related(
        "facility",
        "category",
        "reported_by",
        "assigned_to",
        "closure_requested_by",
        "closure_approved_by",
    )


def incident_for_principal(*, incident_id, principal: Principal, for_update: bool = False) -> Incident:
    """
    Load one incident and enforce the facility rule.

    Missing ids raise NotFound before the facility check raises
    PermissionDenied. With for_update the row is locked and nothing is joined
    (row locks cannot cover the nullable side of an outer join).
    """
    qs = Incident.objects.select_for_update() if for_update else _base_queryset()
    try:
        incident = qs.get(id=incident_id)
    except (Incident.DoesNotExist, ValueError, TypeError):
        raise NotFound("Incident not found.")

    if not principal.can_access_facility(incident.facility_id):
        raise PermissionDenied(FACILITY_FORBIDDEN_MSG)
    return incident


def visible_incidents(*, principal: Principal) -> QuerySet[Incident]:
    qs = _base_queryset()
    if not principal.is_admin:
        qs = qs.filter(facility_id=principal.facility_id)
    return qs


def list_incidents(*, principal: Principal, params=None) -> QuerySet[Incident]:
    """
    Facility-scoped, filtered list, newest first.

    A non-admin's facility_id parameter is ignored: they only ever see their
    own facility.
    """
    data = params.copy() if params is not None else {}
    if not principal.is_admin:
        data.pop("facility_id", None)

    f = IncidentFilter(data, queryset=visible_incidents(principal=principal))
    if not f.is_valid():
        raise ValidationError(f.errors)
    return f.qs.order_by("-created_at", "-id")


def incident_metrics(*, principal: Principal) -> dict:
    qs = Incident.objects.all()
    if not principal.is_admin:
        qs = qs.filter(facility_id=principal.facility_id)

    counts = qs.aggregate(
        total=Count("id"),
        open=Count("id", filter=Q(status=IncidentStatus.OPEN)),
        in_review=Count("id", filter=Q(status=IncidentStatus.IN_REVIEW)),
        pending_closure=Count("id", filter=Q(status=IncidentStatus.PENDING_CLOSURE)),
        closed=Count("id", filter=Q(status=IncidentStatus.CLOSED)),
        high_priority=Count("id", filter=Q(priority=IncidentPriority.HIGH)),
        flagged=Count("id", filter=Q(is_flagged=True)),
    )

    facilities = Facility.objects.filter(is_active=True)
    if not principal.is_admin:
        facilities = facilities.filter(id=principal.facility_id)
    counts["active_facilities"] = facilities.count()
    return counts
