# ovr_core/incidents/models.py
from __future__ import annotations

from django.conf import settings
from django.db import models

from ovr_core.common.models import TimeStampedModel


class IncidentStatus(models.TextChoices):
    OPEN = "open", "Open"
    IN_REVIEW = "in_review", "In review"
    PENDING_CLOSURE = "pending_closure", "Pending closure"
    CLOSED = "closed", "Closed"


class IncidentPriority(models.TextChoices):
    LOW = "low", "Low"
    MEDIUM = "medium", "Medium"
    HIGH = "high", "High"


class ReportType(models.TextChoices):
    INCIDENT = "incident", "Incident"
    NEAR_MISS = "near_miss", "Near miss"
    MANDATORY_REPORTABLE_EVENT = "mandatory_reportable_event", "Mandatory reportable event"
    SENTINEL_EVENT = "sentinel_event", "Sentinel event"


class LevelOfHarm(models.TextChoices):
    NO_HARM = "no_harm", "No harm"
    LOW = "low", "Low"
    MODERATE = "moderate", "Moderate"
    SEVERE = "severe", "Severe"
    DEATH = "death", "Death"


class LikelihoodCategory(models.TextChoices):
    RARE = "rare", "Rare"
    UNLIKELY = "unlikely", "Unlikely"
    POSSIBLE = "possible", "Possible"
    LIKELY = "likely", "Likely"
    ALMOST_CERTAIN = "almost_certain", "Almost certain"


class Incident(TimeStampedModel):
    """
    Occurrence Variance Report.

    Identity is the auto id plus `ovr_id` (OVR-YYMM-NNNN), allocated from
    OvrSequence at submission time. Status only moves along the edges in
    ovr_core.incidents.state; closure_* fields describe the current closure
    request/approval and are cleared when a request is rejected.
    """

    ovr_id = models.CharField(max_length=32, unique=True, editable=False)

    facility = models.ForeignKey("facilities.Facility", on_delete=models.PROTECT, related_name="incidents")
    category = models.ForeignKey("categories.Category", on_delete=models.PROTECT, related_name="incidents")

    # Event
    incident_date = models.DateField(db_index=True)
    incident_time = models.TimeField()
    description = models.TextField()

    reporting_department = models.CharField(max_length=255)
    responding_department = models.CharField(max_length=255)

    # Patient
    patient_name = models.CharField(max_length=255, blank=True, default="")
    medical_record = models.CharField(max_length=64)

    # Classification
    what_is_being_reported = models.CharField(max_length=32, choices=ReportType.choices)
    ovr_category = models.CharField(max_length=128)
    type_of_injury = models.JSONField(default=list)
    level_of_harm = models.CharField(max_length=16, choices=LevelOfHarm.choices)
    likelihood_category = models.CharField(max_length=16, choices=LikelihoodCategory.choices)
    medication_error_details = models.TextField(blank=True, default="")
    action_taken = models.TextField()

    # Reporter (all optional)
    reporter_name = models.CharField(max_length=255, blank=True, default="")
    reporter_mobile = models.CharField(max_length=32, blank=True, default="")
    reporter_email = models.EmailField(blank=True, default="")
    reporter_position = models.CharField(max_length=128, blank=True, default="")
    is_anonymous = models.BooleanField(default=False)
    contact_info = models.CharField(max_length=255, blank=True, default="")

    # Workflow
    status = models.CharField(
        max_length=20,
        choices=IncidentStatus.choices,
        default=IncidentStatus.OPEN,
        db_index=True,
    )
    priority = models.CharField(
        max_length=8,
        choices=IncidentPriority.choices,
        default=IncidentPriority.MEDIUM,
        db_index=True,
    )
    is_flagged = models.BooleanField(default=False, db_index=True)

    reported_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="reported_incidents",
        null=True,
        blank=True,
    )
    assigned_to = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="assigned_incidents",
        null=True,
        blank=True,
    )

    # Closure workflow
    closure_requested_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="closure_requests",
        null=True,
        blank=True,
    )
    closure_requested_at = models.DateTimeField(null=True, blank=True)
    closure_approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="closure_approvals",
        null=True,
        blank=True,
    )
    closure_approved_at = models.DateTimeField(null=True, blank=True)
    closure_reason = models.TextField(blank=True, default="")

    class Meta:
        db_table = "incidents_incident"
        indexes = [
            models.Index(fields=["facility", "status"], name="incident_facility_status_idx"),
            models.Index(fields=["facility", "created_at"], name="incident_facility_created_idx"),
        ]

    def __str__(self) -> str:
        return self.ovr_id or f"Incident {self.pk}"


class OvrSequence(models.Model):
    """
    Counter per calendar bucket ("YYMM"). The row is locked while the next
    number is taken, so concurrent submissions never share a number.
    """
    bucket = models.CharField(max_length=8, unique=True)
    last_value = models.PositiveIntegerField(default=0)

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "incidents_ovr_sequence"

    def __str__(self) -> str:
        return f"{self.bucket}: {self.last_value}"
