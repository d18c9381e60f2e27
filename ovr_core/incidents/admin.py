from django.contrib import admin

from ovr_core.incidents.models import Incident, OvrSequence


@admin.register(Incident)
class IncidentAdmin(admin.ModelAdmin):
    list_display = ("ovr_id", "facility", "category", "status", "priority", "is_flagged", "incident_date", "created_at")
    list_filter = ("status", "priority", "is_flagged", "facility", "what_is_being_reported")
    search_fields = ("ovr_id", "description", "medical_record")
    readonly_fields = ("ovr_id", "created_at", "updated_at")
    raw_id_fields = ("reported_by", "assigned_to", "closure_requested_by", "closure_approved_by")
    date_hierarchy = "incident_date"


@admin.register(OvrSequence)
class OvrSequenceAdmin(admin.ModelAdmin):
    list_display = ("bucket", "last_value", "updated_at")
    readonly_fields = ("bucket", "last_value", "updated_at")
