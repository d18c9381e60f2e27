# ovr_core/facilities/services.py
from __future__ import annotations

import logging

from django.db import transaction
from rest_framework.exceptions import NotFound

from ovr_core.audit.models import AuditAction, AuditEntity
from ovr_core.audit.services import AuditService, RequestMeta
from ovr_core.facilities.models import Facility

logger = logging.getLogger(__name__)

# (name_en, code); Arabic names are filled in through the admin
DEFAULT_FACILITIES = [
    ("Ad Diriyah Hospital", "ADH"),
    ("Al Yamamah Hospital", "AYH"),
    ("Irqah Hospital", "IRH"),
    ("King Saud Medical Complex", "KSMC"),
    ("North Riyadh Hospital", "NRH"),
    ("Riyadh Care Hospital", "RCH"),
    ("Al Eman Hospital", "AEH"),
    ("King Fahd Medical City", "KFMC"),
    ("Prince Sultan Military Medical City", "PSMMC"),
    ("King Khalid University Hospital", "KKUH"),
    ("King Abdulaziz Medical City", "KAMC"),
    ("National Guard Health Affairs", "NGHA"),
    ("King Faisal Specialist Hospital", "KFSH"),
    ("Security Forces Hospital", "SFH"),
]


class FacilityService:
    @staticmethod
    @transaction.atomic
    def seed_defaults() -> int:
        """Insert the cluster's hospitals when the table is empty. Returns rows created."""
        if Facility.objects.exists():
            return 0

        Facility.objects.bulk_create(
            [Facility(name_en=name_en, code=code) for name_en, code in DEFAULT_FACILITIES]
        )
        logger.info("Seeded %s facilities", len(DEFAULT_FACILITIES))
        return len(DEFAULT_FACILITIES)

    @staticmethod
    @transaction.atomic
    def set_active(*, facility_id: int, is_active: bool, actor, meta: RequestMeta | None = None) -> Facility:
        try:
            f = Facility.objects.select_for_update().get(id=facility_id)
        except (Facility.DoesNotExist, ValueError, TypeError):
            raise NotFound("Facility not found.")

        if f.is_active == is_active:
            return f

        f.is_active = is_active
        f.save(update_fields=["is_active", "updated_at"])

        AuditService.record(
            action=AuditAction.UPDATE_FACILITY,
            entity_type=AuditEntity.FACILITY,
            entity_id=f.id,
            actor=actor,
            details={"is_active": is_active},
            meta=meta,
        )
        logger.info("Facility %s %s", f.code, "activated" if is_active else "deactivated")
        return f
