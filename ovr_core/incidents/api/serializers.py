# ovr_core/incidents/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from ovr_core.categories.models import Category
from ovr_core.facilities.api.serializers import FacilitySummarySerializer
from ovr_core.incidents.models import (
    Incident,
    IncidentPriority,
    IncidentStatus,
    LevelOfHarm,
    LikelihoodCategory,
    ReportType,
)
from ovr_core.incidents.services import EDITABLE_FIELDS, IncidentSubmission


# -------------------------
# Read
# -------------------------
class CategorySummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ["id", "name"]
        read_only_fields = fields


class UserRefSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    email = serializers.EmailField(read_only=True)
    name = serializers.SerializerMethodField()

    def get_name(self, obj) -> str:
        return obj.get_full_name() or obj.email


class IncidentSerializer(serializers.ModelSerializer):
    facility = FacilitySummarySerializer(read_only=True)
    category = CategorySummarySerializer(read_only=True)
    reported_by = UserRefSerializer(read_only=True, allow_null=True)
    assigned_to = UserRefSerializer(read_only=True, allow_null=True)
    closure_requested_by = UserRefSerializer(read_only=True, allow_null=True)
    closure_approved_by = UserRefSerializer(read_only=True, allow_null=True)

    class Meta:
        model = Incident
        fields = [
            "id",
            "ovr_id",
            "facility_id",
            "facility",
            "category_id",
            "category",
            "incident_date",
            "incident_time",
            "description",
            "reporting_department",
            "responding_department",
            "patient_name",
            "medical_record",
            "what_is_being_reported",
            "ovr_category",
            "type_of_injury",
            "level_of_harm",
            "likelihood_category",
            "medication_error_details",
            "action_taken",
            "reporter_name",
            "reporter_mobile",
            "reporter_email",
            "reporter_position",
            "is_anonymous",
            "contact_info",
            "status",
            "priority",
            "is_flagged",
            "reported_by",
            "assigned_to",
            "closure_requested_by",
            "closure_requested_at",
            "closure_approved_by",
            "closure_approved_at",
            "closure_reason",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class IncidentMetricsSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    open = serializers.IntegerField()
    in_review = serializers.IntegerField()
    pending_closure = serializers.IntegerField()
    closed = serializers.IntegerField()
    high_priority = serializers.IntegerField()
    flagged = serializers.IntegerField()
    active_facilities = serializers.IntegerField()


# -------------------------
# Write
# -------------------------
class IncidentSubmitSerializer(serializers.Serializer):
    facility_id = serializers.IntegerField()
    category = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    incident_date = serializers.DateField()
    incident_time = serializers.TimeField()
    description = serializers.CharField(min_length=10)
    reporting_department = serializers.CharField(max_length=255)
    responding_department = serializers.CharField(max_length=255)

    patient_name = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    medical_record = serializers.CharField(max_length=64)

    what_is_being_reported = serializers.ChoiceField(choices=ReportType.choices)
    ovr_category = serializers.CharField(max_length=128)
    type_of_injury = serializers.ListField(child=serializers.CharField(max_length=128), allow_empty=False)
    level_of_harm = serializers.ChoiceField(choices=LevelOfHarm.choices)
    likelihood_category = serializers.ChoiceField(choices=LikelihoodCategory.choices)
    medication_error_details = serializers.CharField(required=False, allow_blank=True, default="")
    action_taken = serializers.CharField(min_length=10)

    reporter_name = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    reporter_mobile = serializers.CharField(max_length=32, required=False, allow_blank=True, default="")
    reporter_email = serializers.EmailField(required=False, allow_blank=True, default="")
    reporter_position = serializers.CharField(max_length=128, required=False, allow_blank=True, default="")

    priority = serializers.ChoiceField(choices=IncidentPriority.choices, required=False)

    def to_submission(self, *, allow_priority: bool = True) -> IncidentSubmission:
        d = dict(self.validated_data)
        if not allow_priority:
            d.pop("priority", None)
        return IncidentSubmission(**d)


class PublicSubmitResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    ovr_id = serializers.CharField()
    message = serializers.CharField()


class IncidentUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=IncidentStatus.choices, required=False)
    is_flagged = serializers.BooleanField(required=False)
    priority = serializers.ChoiceField(choices=IncidentPriority.choices, required=False)
    assigned_to_id = serializers.IntegerField(required=False, allow_null=True)


class IncidentEditSerializer(serializers.Serializer):
    field = serializers.ChoiceField(choices=sorted(EDITABLE_FIELDS))
    value = serializers.CharField(allow_blank=True)
    comment = serializers.CharField(required=False, allow_blank=True, default="")


class ClosureReasonSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default="")
