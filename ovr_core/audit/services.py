# ovr_core/audit/services.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from django.db import transaction

from ovr_core.audit.models import AuditLog


@dataclass(frozen=True)
class RequestMeta:
    ip_address: str | None = None
    user_agent: str = ""


@dataclass(frozen=True)
class AuditRecord:
    id: int
    action: str
    entity_type: str
    entity_id: str
    actor_id: int | None
    details: Dict[str, Any]


def request_meta(request) -> RequestMeta:
    """
    Client IP (first X-Forwarded-For hop, else REMOTE_ADDR) and user agent.
    """
    if request is None:
        return RequestMeta()

    meta = getattr(request, "META", {}) or {}
    forwarded = meta.get("HTTP_X_FORWARDED_FOR", "")
    ip = forwarded.split(",")[0].strip() if forwarded else meta.get("REMOTE_ADDR")
    return RequestMeta(
        ip_address=ip or None,
        user_agent=(meta.get("HTTP_USER_AGENT") or "")[:512],
    )


class AuditService:
    """
    Central audit writer. Synchronous: the entry commits or rolls back with
    the change that triggered it.
    """

    @staticmethod
    @transaction.atomic
    def record(
        *,
        action: str,
        entity_type: str,
        entity_id: Any,
        actor=None,
        details: Optional[Dict[str, Any]] = None,
        meta: RequestMeta | None = None,
    ) -> AuditRecord:
        details = details or {}
        meta = meta or RequestMeta()

        actor_id = getattr(actor, "id", None)
        entry = AuditLog.objects.create(
            actor_id=actor_id,
            actor_email=getattr(actor, "email", "") or "",
            action=action,
            entity_type=entity_type,
            entity_id=str(entity_id),
            details=details,
            ip_address=meta.ip_address,
            user_agent=meta.user_agent,
        )

        return AuditRecord(
            id=entry.id,
            action=action,
            entity_type=entity_type,
            entity_id=str(entity_id),
            actor_id=actor_id,
            details=details,
        )
