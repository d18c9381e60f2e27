# ovr_core/audit/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import viewsets
from rest_framework.exceptions import ValidationError

from ovr_core.audit.api.serializers import AuditLogSerializer
from ovr_core.audit.models import AuditLog
from ovr_core.audit.selectors import list_audit_logs
from ovr_core.common.api.pagination import paginate
from ovr_core.common.permissions import AdminOnlyPermission


class AuditLogViewSet(viewsets.GenericViewSet):
    """
    Admin-only audit trail, newest first.
    """
    permission_classes = [AdminOnlyPermission]

    serializer_class = AuditLogSerializer
    queryset = AuditLog.objects.none()

    @extend_schema(
        tags=["Audit"],
        responses={200: AuditLogSerializer(many=True)},
        parameters=[
            OpenApiParameter(
                name="resource_type",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Filter by entity type (incident, user, user_registration, facility).",
            ),
            OpenApiParameter(
                name="resource_id",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Filter by entity id (alias: entity_id).",
            ),
            OpenApiParameter(
                name="action",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Filter by action tag (e.g. request_closure, delete_user).",
            ),
            OpenApiParameter(
                name="user_id",
                type=OpenApiTypes.INT,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Filter by acting user id.",
            ),
        ],
    )
    def list(self, request):
        user_raw = request.query_params.get("user_id")

        actor_id = None
        if user_raw not in (None, ""):
            try:
                actor_id = int(user_raw)
            except (TypeError, ValueError):
                raise ValidationError({"user_id": "Invalid user_id (int expected)."})

        qs = list_audit_logs(
            entity_type=request.query_params.get("resource_type") or None,
            entity_id=request.query_params.get("resource_id") or request.query_params.get("entity_id") or None,
            action=request.query_params.get("action") or None,
            actor_id=actor_id,
        )
        return paginate(request, qs, AuditLogSerializer)
