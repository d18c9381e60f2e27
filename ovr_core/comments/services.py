# ovr_core/comments/services.py
from __future__ import annotations

import logging

from django.db import transaction
from rest_framework.exceptions import ValidationError

from ovr_core.audit.models import AuditAction, AuditEntity
from ovr_core.audit.services import AuditService, RequestMeta
from ovr_core.comments.models import Comment, CommentKind
from ovr_core.iam.principal import Principal
from ovr_core.incidents.selectors import incident_for_principal

logger = logging.getLogger(__name__)


class CommentService:
    @staticmethod
    def add_system(*, incident, author, content: str) -> Comment:
        """
        Workflow note written by the incident service inside its own
        transaction. Not audited separately: the triggering action is.
        """
        return Comment.objects.create(
            incident=incident,
            author=author,
            content=content,
            kind=CommentKind.SYSTEM,
        )

    @staticmethod
    @transaction.atomic
    def add(
        *,
        incident_id,
        principal: Principal,
        author,
        content: str,
        meta: RequestMeta | None = None,
    ) -> Comment:
        incident = incident_for_principal(incident_id=incident_id, principal=principal)

        content = (content or "").strip()
        if not content:
            raise ValidationError({"content": "Comment content is required."})

        comment = Comment.objects.create(
            incident=incident,
            author=author,
            content=content,
            kind=CommentKind.COMMENT,
        )

        AuditService.record(
            action=AuditAction.ADD_COMMENT,
            entity_type=AuditEntity.INCIDENT,
            entity_id=incident.id,
            actor=author,
            details={"comment_id": comment.id, "ovr_id": incident.ovr_id},
            meta=meta,
        )
        logger.info("Comment %s added to incident %s", comment.id, incident.ovr_id)
        return comment
