# ovr_core/audit/models.py
from django.conf import settings
from django.db import models


class AuditAction(models.TextChoices):
    CREATE_INCIDENT = "create_incident", "Create incident"
    UPDATE_INCIDENT = "update_incident", "Update incident"
    EDIT_INCIDENT = "edit_incident", "Edit incident"
    DELETE_INCIDENT = "delete_incident", "Delete incident"
    REQUEST_CLOSURE = "request_closure", "Request closure"
    APPROVE_CLOSURE = "approve_closure", "Approve closure"
    REJECT_CLOSURE = "reject_closure", "Reject closure"
    ADD_COMMENT = "add_comment", "Add comment"
    APPROVE_REGISTRATION = "approve_registration", "Approve registration"
    REJECT_REGISTRATION = "reject_registration", "Reject registration"
    UPDATE_USER = "update_user", "Update user"
    DELETE_USER = "delete_user", "Delete user"
    UPDATE_FACILITY = "update_facility", "Update facility"


class AuditEntity(models.TextChoices):
    INCIDENT = "incident", "Incident"
    USER = "user", "User"
    USER_REGISTRATION = "user_registration", "User registration"
    FACILITY = "facility", "Facility"


class AuditLog(models.Model):
    """
    Immutable audit record. Written in the same transaction as the change it describes.

    `actor` becomes NULL when the acting user is deleted; `actor_email` keeps
    the identity readable afterwards.
    """
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="audit_logs",
        null=True,
        blank=True,
    )
    actor_email = models.CharField(max_length=254, blank=True, default="")

    action = models.CharField(max_length=64, choices=AuditAction.choices, db_index=True)
    entity_type = models.CharField(max_length=64, choices=AuditEntity.choices, db_index=True)
    entity_id = models.CharField(max_length=64, db_index=True)

    details = models.JSONField(default=dict, blank=True)

    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.CharField(max_length=512, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = "audit_log"
        indexes = [
            models.Index(fields=["entity_type", "entity_id"], name="audit_entity_idx"),
            models.Index(fields=["actor", "created_at"], name="audit_actor_created_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.action} {self.entity_type}:{self.entity_id}"
