# ovr_core/audit/selectors.py
from __future__ import annotations

from django.db.models import QuerySet

from ovr_core.audit.models import AuditLog


def list_audit_logs(
    *,
    entity_type: str | None = None,
    entity_id: str | None = None,
    action: str | None = None,
    actor_id: int | None = None,
) -> QuerySet[AuditLog]:
    qs = AuditLog.objects.select_related("actor")

    if entity_type:
        qs = qs.filter(entity_type=entity_type)
    if entity_id:
        qs = qs.filter(entity_id=str(entity_id))
    if action:
        qs = qs.filter(action=action)
    if actor_id is not None:
        qs = qs.filter(actor_id=actor_id)

    return qs.order_by("-created_at", "-id")
