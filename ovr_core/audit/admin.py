# ovr_core/audit/admin.py
from django.contrib import admin

from ovr_core.audit.models import AuditLog


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = (
        "action",
        "entity_type",
        "entity_id",
        "actor",
        "actor_email",
        "ip_address",
        "created_at",
    )
    list_filter = ("action", "entity_type")
    search_fields = ("action", "entity_type", "entity_id", "actor_email")
    readonly_fields = [f.name for f in AuditLog._meta.fields]
    ordering = ("-created_at",)

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
