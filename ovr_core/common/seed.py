# ovr_core/common/seed.py
from __future__ import annotations

import logging

from django.conf import settings

from ovr_core.categories.services import CategoryService
from ovr_core.facilities.models import Facility
from ovr_core.facilities.services import FacilityService
from ovr_core.iam.models import UserRole
from ovr_core.iam.services.accounts import create_account, find_user_by_email

logger = logging.getLogger(__name__)


def ensure_default_admin(*, email: str | None = None, password: str | None = None):
    """
    Bootstrap administrator bound to the first facility. Skipped when no
    password is configured or the account already exists.
    """
    email = email or getattr(settings, "OVR_DEFAULT_ADMIN_EMAIL", "")
    password = password or getattr(settings, "OVR_DEFAULT_ADMIN_PASSWORD", "")
    if not email or not password:
        logger.info("Default admin not created: no admin password configured")
        return None

    if find_user_by_email(email) is not None:
        return None

    facility = Facility.objects.order_by("id").first()
    user = create_account(
        email=email,
        first_name="System",
        last_name="Administrator",
        role=UserRole.ADMIN,
        facility_id=facility.id if facility else None,
        position="System Administrator",
        raw_password=password,
    )
    logger.info("Default admin %s created", user.email)
    return user


def seed_reference_data(*, admin_email: str | None = None, admin_password: str | None = None) -> dict:
    """Idempotent first-boot data: facilities, categories, bootstrap admin."""
    facilities = FacilityService.seed_defaults()
    categories = CategoryService.seed_defaults()
    admin = ensure_default_admin(email=admin_email, password=admin_password)
    return {
        "facilities": facilities,
        "categories": categories,
        "admin_created": admin is not None,
    }


def seed_on_migrate(sender, **kwargs) -> None:
    if not getattr(settings, "OVR_SEED_ON_MIGRATE", False):
        return
    result = seed_reference_data()
    logger.info("Reference data seeded after migrate: %s", result)
