# ovr_core/facilities/models.py
from __future__ import annotations

from django.db import models

from ovr_core.common.models import TimeStampedModel


class Facility(TimeStampedModel):
    """
    A hospital in the cluster.

    Seeded once; after that the only permitted mutation is the activation toggle.
    Referenced by incidents, user profiles and registrations.
    """

    name_en = models.CharField(max_length=255)
    name_ar = models.CharField(max_length=255, blank=True, default="")
    code = models.CharField(max_length=32, unique=True)

    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        db_table = "facilities_facility"
        verbose_name_plural = "facilities"

    def __str__(self) -> str:
        return f"{self.name_en} ({self.code})"
