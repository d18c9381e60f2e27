# ovr_core/categories/services.py
from __future__ import annotations

import logging

from django.db import transaction

from ovr_core.categories.models import Category

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    ("Patient Safety", "Incidents related to patient safety and care"),
    ("Equipment Failure", "Medical equipment malfunctions or failures"),
    ("Medication Error", "Errors in medication administration or prescription"),
    ("Falls", "Patient or staff falls and related injuries"),
    ("Infection Control", "Healthcare-associated infections and prevention failures"),
    ("Communication", "Communication breakdowns between staff or with patients"),
    ("Other", "Other incident types not covered by main categories"),
]


class CategoryService:
    @staticmethod
    @transaction.atomic
    def seed_defaults() -> int:
        """Insert the default categories when the table is empty. Returns rows created."""
        if Category.objects.exists():
            return 0

        Category.objects.bulk_create(
            [Category(name=name, description=description) for name, description in DEFAULT_CATEGORIES]
        )
        logger.info("Seeded %s incident categories", len(DEFAULT_CATEGORIES))
        return len(DEFAULT_CATEGORIES)
