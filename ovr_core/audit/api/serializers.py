# ovr_core/audit/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from ovr_core.audit.models import AuditLog


class AuditLogSerializer(serializers.ModelSerializer):
    # API field names follow the filter params (resource_type / user_id)
    resource_type = serializers.CharField(source="entity_type", read_only=True)
    resource_id = serializers.CharField(source="entity_id", read_only=True)
    user_id = serializers.IntegerField(source="actor_id", read_only=True, allow_null=True)
    user_email = serializers.CharField(source="actor_email", read_only=True)

    class Meta:
        model = AuditLog
        fields = [
            "id",
            "action",
            "resource_type",
            "resource_id",
            "user_id",
            "user_email",
            "details",
            "ip_address",
            "user_agent",
            "created_at",
        ]
        read_only_fields = fields
