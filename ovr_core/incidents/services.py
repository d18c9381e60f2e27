# ovr_core/incidents/services.py

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import PermissionDenied, ValidationError

from ovr_core.audit.models import AuditAction, AuditEntity, AuditLog
from ovr_core.audit.services import AuditService, RequestMeta
from ovr_core.categories.selectors import category_for_name
from ovr_core.comments.models import Comment
from ovr_core.comments.services import CommentService
from ovr_core.common.api.exceptions import ConflictError
from ovr_core.facilities.models import Facility
from ovr_core.iam.principal import Principal
from ovr_core.incidents.ids import next_ovr_id
from ovr_core.incidents.models import Incident, IncidentStatus, ReportType
from ovr_core.incidents.selectors import incident_for_principal
from ovr_core.incidents.state import CLOSURE_REQUESTABLE, can_move_manually

logger = logging.getLogger(__name__)

ADMIN_REQUIRED_MSG = "Access denied. Admin privileges required."

# Fields that may be corrected after submission, with their display label.
EDITABLE_FIELDS = {
    "ovr_category": "Category",
    "what_is_being_reported": "Incident Type",
}

_UNSET: Any = object()


@dataclass(frozen=True)
class IncidentSubmission:
    facility_id: int
    incident_date: datetime.date
    incident_time: datetime.time
    description: str
    reporting_department: str
    responding_department: str
    medical_record: str
    what_is_being_reported: str
    ovr_category: str
    type_of_injury: list = field(default_factory=list)
    level_of_harm: str = ""
    likelihood_category: str = ""
    action_taken: str = ""
    patient_name: str = ""
    medication_error_details: str = ""
    reporter_name: str = ""
    reporter_mobile: str = ""
    reporter_email: str = ""
    reporter_position: str = ""
    category: Optional[str] = None
    priority: Optional[str] = None


@dataclass(frozen=True)
class IncidentUpdate:
    status: Optional[str] = None
    is_flagged: Optional[bool] = None
    priority: Optional[str] = None
    # _UNSET leaves the assignee alone; None unassigns.
    assigned_to_id: Any = _UNSET


def _dedupe(values) -> list:
    seen = []
    for v in values or []:
        v = str(v).strip()
        if v and v not in seen:
            seen.append(v)
    return seen


def _snapshot(incident: Incident) -> dict:
    return {
        "ovr_id": incident.ovr_id,
        "facility_id": incident.facility_id,
        "category_id": incident.category_id,
        "status": incident.status,
        "priority": incident.priority,
        "incident_date": incident.incident_date.isoformat() if incident.incident_date else None,
        "reported_by_id": incident.reported_by_id,
    }


class IncidentService:
    """
    Incident write-model: submission and the status workflow.

    open <-> in_review          facility users and admins (generic update)
    open/in_review -> pending   request_closure (reason required)
    pending -> closed           approve_closure (admin)
    pending -> in_review        reject_closure (admin, reason required)

    Every mutation loads the row via incident_for_principal, so a missing id
    is 404 and a foreign facility is 403 before any input is looked at.
    """

    # -------------------------
    # Internal helpers
    # -------------------------
    @staticmethod
    def _require_admin(principal: Principal) -> None:
        if not principal.is_admin:
            raise PermissionDenied(ADMIN_REQUIRED_MSG)

    @staticmethod
    def _required_text(value: str | None, *, field_name: str, message: str) -> str:
        value = (value or "").strip()
        if not value:
            raise ValidationError({field_name: message})
        return value

    @staticmethod
    def _audit(*, action: str, incident: Incident, actor, details: dict, meta: RequestMeta | None) -> None:
        AuditService.record(
            action=action,
            entity_type=AuditEntity.INCIDENT,
            entity_id=incident.id,
            actor=actor,
            details={"ovr_id": incident.ovr_id, **details},
            meta=meta,
        )

    @staticmethod
    def _clear_closure_request(incident: Incident) -> list[str]:
        incident.closure_requested_by = None
        incident.closure_requested_at = None
        incident.closure_reason = ""
        return ["closure_requested_by", "closure_requested_at", "closure_reason"]

    @staticmethod
    def _clear_closure_approval(incident: Incident) -> list[str]:
        incident.closure_approved_by = None
        incident.closure_approved_at = None
        return ["closure_approved_by", "closure_approved_at"]

    # -------------------------
    # Submission
    # -------------------------
    @staticmethod
    @transaction.atomic
    def submit(
        *,
        data: IncidentSubmission,
        principal: Principal | None = None,
        actor=None,
        meta: RequestMeta | None = None,
    ) -> Incident:
        """
        Create an incident in `open` with a fresh OVR id.

        Anonymous when principal is None. A non-admin principal may only
        report for their own facility.
        """
        facility = Facility.objects.filter(id=data.facility_id).first()
        if facility is None or not facility.is_active:
            raise ValidationError({"facility_id": "Facility not found or inactive."})

        if principal is not None and not principal.can_access_facility(facility.id):
            raise PermissionDenied("You can only report incidents for your own facility.")

        category = category_for_name(data.category)
        if category is None:
            raise ValidationError({"category": "No active incident category is configured."})

        injuries = _dedupe(data.type_of_injury)
        if not injuries:
            raise ValidationError({"type_of_injury": "Select at least one type of injury."})

        reporter_name = (data.reporter_name or "").strip()
        reporter_email = (data.reporter_email or "").strip()
        reporter_mobile = (data.reporter_mobile or "").strip()

        incident = Incident(
            ovr_id=next_ovr_id(at=timezone.now()),
            facility=facility,
            category=category,
            incident_date=data.incident_date,
            incident_time=data.incident_time,
            description=data.description.strip(),
            reporting_department=data.reporting_department.strip(),
            responding_department=data.responding_department.strip(),
            patient_name=(data.patient_name or "").strip(),
            medical_record=data.medical_record.strip(),
            what_is_being_reported=data.what_is_being_reported,
            ovr_category=data.ovr_category.strip(),
            type_of_injury=injuries,
            level_of_harm=data.level_of_harm,
            likelihood_category=data.likelihood_category,
            medication_error_details=(data.medication_error_details or "").strip(),
            action_taken=data.action_taken.strip(),
            reporter_name=reporter_name,
            reporter_mobile=reporter_mobile,
            reporter_email=reporter_email,
            reporter_position=(data.reporter_position or "").strip(),
            is_anonymous=not reporter_name and not reporter_email,
            contact_info=reporter_email or reporter_mobile,
            status=IncidentStatus.OPEN,
            reported_by=actor if principal is not None else None,
        )
        if data.priority:
            incident.priority = data.priority
        incident.save()

        IncidentService._audit(
            action=AuditAction.CREATE_INCIDENT,
            incident=incident,
            actor=actor if principal is not None else None,
            details={
                "facility_id": facility.id,
                "category_id": category.id,
                "anonymous_submission": principal is None,
            },
            meta=meta,
        )
        logger.info("Incident %s submitted for facility %s", incident.ovr_id, facility.code)
        return incident

    # -------------------------
    # Generic update (status / flag / priority / assignee)
    # -------------------------
    @staticmethod
    @transaction.atomic
    def update(
        *,
        incident_id,
        patch: IncidentUpdate,
        principal: Principal,
        actor,
        meta: RequestMeta | None = None,
    ) -> Incident:
        incident = incident_for_principal(incident_id=incident_id, principal=principal, for_update=True)

        changes: dict = {}
        update_fields: list[str] = []
        previous_status = incident.status

        if patch.status is not None and patch.status != incident.status:
            target = patch.status
            if target not in IncidentStatus.values:
                raise ValidationError({"status": "Invalid status."})

            if not principal.is_admin:
                if target == IncidentStatus.CLOSED:
                    raise ValidationError({"status": "Only administrators can close incidents."})
                if not can_move_manually(incident.status, target):
                    raise ConflictError(f"Cannot change status from {incident.status} to {target}.")
            else:
                # A pending request is settled by approve/reject; entering it needs request-closure.
                if previous_status == IncidentStatus.PENDING_CLOSURE:
                    raise ConflictError("A pending closure request must be approved or rejected.")
                if target == IncidentStatus.PENDING_CLOSURE:
                    raise ConflictError("Use request-closure to ask for closure.")

                if target == IncidentStatus.CLOSED:
                    incident.closure_approved_by = actor
                    incident.closure_approved_at = timezone.now()
                    update_fields += ["closure_approved_by", "closure_approved_at"]
                elif previous_status == IncidentStatus.CLOSED:
                    update_fields += IncidentService._clear_closure_approval(incident)
                    update_fields += IncidentService._clear_closure_request(incident)

            incident.status = target
            update_fields.append("status")
            changes["status"] = {"from": previous_status, "to": target}

        if patch.is_flagged is not None and patch.is_flagged != incident.is_flagged:
            changes["is_flagged"] = {"from": incident.is_flagged, "to": patch.is_flagged}
            incident.is_flagged = patch.is_flagged
            update_fields.append("is_flagged")

        if principal.is_admin:
            if patch.priority is not None and patch.priority != incident.priority:
                changes["priority"] = {"from": incident.priority, "to": patch.priority}
                incident.priority = patch.priority
                update_fields.append("priority")

            if patch.assigned_to_id is not _UNSET and patch.assigned_to_id != incident.assigned_to_id:
                if patch.assigned_to_id is not None:
                    if not get_user_model().objects.filter(id=patch.assigned_to_id, is_active=True).exists():
                        raise ValidationError({"assigned_to_id": "User not found."})
                changes["assigned_to_id"] = {"from": incident.assigned_to_id, "to": patch.assigned_to_id}
                incident.assigned_to_id = patch.assigned_to_id
                update_fields.append("assigned_to")

        if not changes:
            return incident

        update_fields.append("updated_at")
        incident.save(update_fields=sorted(set(update_fields)))

        IncidentService._audit(
            action=AuditAction.UPDATE_INCIDENT,
            incident=incident,
            actor=actor,
            details={"changes": changes},
            meta=meta,
        )
        logger.info("Incident %s updated: %s", incident.ovr_id, sorted(changes))
        return incident

    # -------------------------
    # Field edit with justification
    # -------------------------
    @staticmethod
    @transaction.atomic
    def edit_field(
        *,
        incident_id,
        field_name: str,
        value: str,
        comment: str,
        principal: Principal,
        actor,
        meta: RequestMeta | None = None,
    ) -> Incident:
        incident = incident_for_principal(incident_id=incident_id, principal=principal, for_update=True)

        if field_name not in EDITABLE_FIELDS:
            raise ValidationError({"field": f"Field must be one of: {', '.join(EDITABLE_FIELDS)}."})

        comment = IncidentService._required_text(
            comment, field_name="comment", message="A comment explaining the change is required."
        )
        value = IncidentService._required_text(value, field_name="value", message="A new value is required.")
        if field_name == "what_is_being_reported" and value not in ReportType.values:
            raise ValidationError({"value": "Invalid incident type."})

        old = getattr(incident, field_name)
        if old == value:
            return incident

        setattr(incident, field_name, value)
        incident.save(update_fields=[field_name, "updated_at"])

        label = EDITABLE_FIELDS[field_name]
        CommentService.add_system(
            incident=incident,
            author=actor,
            content=f"{label} updated from '{old}' to '{value}'. Reason: {comment}",
        )
        IncidentService._audit(
            action=AuditAction.EDIT_INCIDENT,
            incident=incident,
            actor=actor,
            details={"field": field_name, "from": old, "to": value, "comment": comment},
            meta=meta,
        )
        logger.info("Incident %s field %s edited", incident.ovr_id, field_name)
        return incident

    # -------------------------
    # Closure workflow
    # -------------------------
    @staticmethod
    @transaction.atomic
    def request_closure(
        *,
        incident_id,
        reason: str,
        principal: Principal,
        actor,
        meta: RequestMeta | None = None,
    ) -> Incident:
        incident = incident_for_principal(incident_id=incident_id, principal=principal, for_update=True)
        reason = IncidentService._required_text(reason, field_name="reason", message="Closure reason is required.")

        if incident.status not in CLOSURE_REQUESTABLE:
            raise ConflictError(f"Closure cannot be requested for an incident in status {incident.status}.")

        previous_status = incident.status
        incident.status = IncidentStatus.PENDING_CLOSURE
        incident.closure_requested_by = actor
        incident.closure_requested_at = timezone.now()
        incident.closure_reason = reason
        incident.save(
            update_fields=["status", "closure_requested_by", "closure_requested_at", "closure_reason", "updated_at"]
        )

        CommentService.add_system(incident=incident, author=actor, content=f"Closure requested. Reason: {reason}")
        IncidentService._audit(
            action=AuditAction.REQUEST_CLOSURE,
            incident=incident,
            actor=actor,
            details={"previous_status": previous_status, "reason": reason},
            meta=meta,
        )
        logger.info("Closure requested for incident %s", incident.ovr_id)
        return incident

    @staticmethod
    @transaction.atomic
    def approve_closure(
        *,
        incident_id,
        principal: Principal,
        actor,
        meta: RequestMeta | None = None,
    ) -> Incident:
        incident = incident_for_principal(incident_id=incident_id, principal=principal, for_update=True)
        IncidentService._require_admin(principal)

        if incident.status != IncidentStatus.PENDING_CLOSURE:
            raise ConflictError("Only incidents pending closure can be approved.")

        incident.status = IncidentStatus.CLOSED
        incident.closure_approved_by = actor
        incident.closure_approved_at = timezone.now()
        incident.save(update_fields=["status", "closure_approved_by", "closure_approved_at", "updated_at"])

        CommentService.add_system(
            incident=incident,
            author=actor,
            content=f"Closure approved. Original closure reason: {incident.closure_reason}",
        )
        IncidentService._audit(
            action=AuditAction.APPROVE_CLOSURE,
            incident=incident,
            actor=actor,
            details={"closure_reason": incident.closure_reason},
            meta=meta,
        )
        logger.info("Closure approved for incident %s", incident.ovr_id)
        return incident

    @staticmethod
    @transaction.atomic
    def reject_closure(
        *,
        incident_id,
        reason: str,
        principal: Principal,
        actor,
        meta: RequestMeta | None = None,
    ) -> Incident:
        incident = incident_for_principal(incident_id=incident_id, principal=principal, for_update=True)
        IncidentService._require_admin(principal)
        reason = IncidentService._required_text(reason, field_name="reason", message="Rejection reason is required.")

        if incident.status != IncidentStatus.PENDING_CLOSURE:
            raise ConflictError("Only incidents pending closure can be rejected.")

        original_reason = incident.closure_reason
        incident.status = IncidentStatus.IN_REVIEW
        fields = IncidentService._clear_closure_request(incident)
        incident.save(update_fields=["status", *fields, "updated_at"])

        CommentService.add_system(
            incident=incident,
            author=actor,
            content=f"Closure rejected. Reason: {reason}. Original closure reason: {original_reason}",
        )
        IncidentService._audit(
            action=AuditAction.REJECT_CLOSURE,
            incident=incident,
            actor=actor,
            details={"reason": reason, "original_closure_reason": original_reason},
            meta=meta,
        )
        logger.info("Closure rejected for incident %s", incident.ovr_id)
        return incident

    # -------------------------
    # Delete (admin)
    # -------------------------
    @staticmethod
    @transaction.atomic
    def delete(*, incident_id, principal: Principal, actor, meta: RequestMeta | None = None) -> None:
        """
        Removes the incident, its comments and its incident-scoped audit
        trail, then records the deletion with a summary of what was removed.
        """
        incident = incident_for_principal(incident_id=incident_id, principal=principal, for_update=True)
        IncidentService._require_admin(principal)

        snapshot = _snapshot(incident)
        incident_pk = incident.id

        Comment.objects.filter(incident_id=incident_pk).delete()
        AuditLog.objects.filter(entity_type=AuditEntity.INCIDENT, entity_id=str(incident_pk)).delete()
        incident.delete()

        AuditService.record(
            action=AuditAction.DELETE_INCIDENT,
            entity_type=AuditEntity.INCIDENT,
            entity_id=incident_pk,
            actor=actor,
            details=snapshot,
            meta=meta,
        )
        logger.info("Incident %s deleted", snapshot["ovr_id"])
