# ovr_core/iam/services/users.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from django.contrib.auth import get_user_model
from django.db import DatabaseError, transaction
from rest_framework.exceptions import NotFound, ValidationError

from ovr_core.audit.models import AuditAction, AuditEntity, AuditLog
from ovr_core.audit.services import AuditService, RequestMeta
from ovr_core.common.api.exceptions import ConflictError
from ovr_core.facilities.models import Facility
from ovr_core.iam.models import UserProfile, UserRole

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserUpdate:
    role: Optional[str] = None
    facility_id: Optional[int] = None
    is_active: Optional[bool] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    position: Optional[str] = None


class UserAdminService:
    @staticmethod
    def _get_locked(user_id):
        User = get_user_model()
        try:
            return User.objects.select_for_update().get(id=user_id)
        except (User.DoesNotExist, ValueError, TypeError):
            raise NotFound("User not found.")

    @staticmethod
    @transaction.atomic
    def update(*, user_id, patch: UserUpdate, actor, meta: RequestMeta | None = None):
        user = UserAdminService._get_locked(user_id)
        profile, _ = UserProfile.objects.select_for_update().get_or_create(user=user)

        changes: dict = {}

        if patch.role is not None:
            if patch.role not in UserRole.values:
                raise ValidationError({"role": "Invalid role."})
            if profile.role != patch.role:
                profile.role = patch.role
                changes["role"] = patch.role

        if patch.facility_id is not None:
            if not Facility.objects.filter(id=patch.facility_id).exists():
                raise ValidationError({"facility_id": "Facility not found."})
            if profile.facility_id != patch.facility_id:
                profile.facility_id = patch.facility_id
                changes["facility_id"] = patch.facility_id

        if profile.role == UserRole.USER and profile.facility_id is None:
            raise ValidationError({"facility_id": "Users must be bound to a facility."})

        if patch.position is not None and profile.position != patch.position:
            profile.position = patch.position
            changes["position"] = patch.position

        user_fields = []
        mapping = {
            "is_active": patch.is_active,
            "first_name": patch.first_name,
            "last_name": patch.last_name,
        }
        for field, value in mapping.items():
            if value is not None and getattr(user, field) != value:
                setattr(user, field, value)
                user_fields.append(field)
                changes[field] = value

        if not changes:
            return user

        if user_fields:
            user.save(update_fields=user_fields)
        profile.save()

        AuditService.record(
            action=AuditAction.UPDATE_USER,
            entity_type=AuditEntity.USER,
            entity_id=user.id,
            actor=actor,
            details=changes,
            meta=meta,
        )
        logger.info("User %s updated: %s", user.id, sorted(changes))
        return user

    @staticmethod
    @transaction.atomic
    def delete(*, user_id, actor, meta: RequestMeta | None = None) -> None:
        """
        Hard delete with reference cleanup.

        Incident reporter/assignee/closure references, registration reviewers
        and comment authors are nulled by their SET_NULL foreign keys. The
        user's own audit rows are removed. The deletion's own audit entry is
        best effort: a failure is logged, not raised.
        """
        user = UserAdminService._get_locked(user_id)
        if actor is not None and user.id == actor.id:
            raise ConflictError("You cannot delete your own account.")

        deleted_id = user.id
        email = user.email

        AuditLog.objects.filter(actor_id=deleted_id).delete()
        user.delete()

        try:
            with transaction.atomic():
                AuditService.record(
                    action=AuditAction.DELETE_USER,
                    entity_type=AuditEntity.USER,
                    entity_id=deleted_id,
                    actor=actor,
                    details={"email": email},
                    meta=meta,
                )
        except DatabaseError:
            logger.warning("Could not write audit entry for deletion of user %s", deleted_id, exc_info=True)

        logger.info("User %s deleted", deleted_id)
