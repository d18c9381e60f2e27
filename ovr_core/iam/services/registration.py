# ovr_core/iam/services/registration.py

from __future__ import annotations

import logging

from django.contrib.auth.hashers import make_password
from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from ovr_core.audit.models import AuditAction, AuditEntity
from ovr_core.audit.services import AuditService, RequestMeta
from ovr_core.common.api.exceptions import ConflictError
from ovr_core.facilities.models import Facility
from ovr_core.iam.models import RegistrationStatus, UserRegistration, UserRole
from ovr_core.iam.services.accounts import create_account, find_user_by_email, normalize_email

logger = logging.getLogger(__name__)


class RegistrationService:
    """
    Registration review queue.

    pending -> approved (creates the User) or pending -> rejected; both terminal.
    """

    @staticmethod
    def _get_locked(registration_id) -> UserRegistration:
        try:
            return UserRegistration.objects.select_for_update().get(id=registration_id)
        except (UserRegistration.DoesNotExist, ValueError, TypeError):
            raise NotFound("Registration not found.")

    @staticmethod
    def _ensure_pending(registration: UserRegistration) -> None:
        if registration.status != RegistrationStatus.PENDING:
            raise ConflictError(f"Registration has already been {registration.status}.")

    @staticmethod
    @transaction.atomic
    def submit(
        *,
        email: str,
        first_name: str,
        last_name: str,
        facility_id: int,
        position: str = "",
        password: str,
    ) -> UserRegistration:
        email = normalize_email(email)

        if find_user_by_email(email) is not None:
            raise ConflictError("User with this email already exists")
        if UserRegistration.objects.filter(email=email).exists():
            raise ConflictError("Registration request already exists for this email")

        if not Facility.objects.filter(id=facility_id, is_active=True).exists():
            raise ValidationError({"facility_id": "Unknown or inactive facility."})

        try:
            with transaction.atomic():
                registration = UserRegistration.objects.create(
                    email=email,
                    first_name=first_name.strip(),
                    last_name=last_name.strip(),
                    facility_id=facility_id,
                    position=(position or "").strip(),
                    password=make_password(password),
                )
        except IntegrityError:
            raise ConflictError("Registration request already exists for this email")

        logger.info("Registration %s submitted for facility %s", registration.id, facility_id)
        return registration

    @staticmethod
    @transaction.atomic
    def approve(*, registration_id, actor, meta: RequestMeta | None = None):
        registration = RegistrationService._get_locked(registration_id)
        RegistrationService._ensure_pending(registration)

        if find_user_by_email(registration.email) is not None:
            raise ConflictError("User with this email already exists")

        # The stored value is already a hash; it is copied, never re-hashed.
        user = create_account(
            email=registration.email,
            first_name=registration.first_name,
            last_name=registration.last_name,
            role=UserRole.USER,
            facility_id=registration.facility_id,
            position=registration.position,
            password_hash=registration.password,
        )

        registration.status = RegistrationStatus.APPROVED
        registration.reviewed_at = timezone.now()
        registration.reviewed_by = actor
        registration.save(update_fields=["status", "reviewed_at", "reviewed_by"])

        AuditService.record(
            action=AuditAction.APPROVE_REGISTRATION,
            entity_type=AuditEntity.USER_REGISTRATION,
            entity_id=registration.id,
            actor=actor,
            details={"email": registration.email, "user_id": user.id},
            meta=meta,
        )
        logger.info("Registration %s approved, user %s created", registration.id, user.id)
        return registration, user

    @staticmethod
    @transaction.atomic
    def reject(*, registration_id, actor, reason: str | None, meta: RequestMeta | None = None) -> UserRegistration:
        registration = RegistrationService._get_locked(registration_id)

        reason = (reason or "").strip()
        if not reason:
            raise ValidationError({"reason": "A rejection reason is required."})

        RegistrationService._ensure_pending(registration)

        registration.status = RegistrationStatus.REJECTED
        registration.reviewed_at = timezone.now()
        registration.reviewed_by = actor
        registration.rejection_reason = reason
        registration.save(update_fields=["status", "reviewed_at", "reviewed_by", "rejection_reason"])

        AuditService.record(
            action=AuditAction.REJECT_REGISTRATION,
            entity_type=AuditEntity.USER_REGISTRATION,
            entity_id=registration.id,
            actor=actor,
            details={"email": registration.email, "reason": reason},
            meta=meta,
        )
        logger.info("Registration %s rejected", registration.id)
        return registration
