# ovr_core/categories/models.py
from __future__ import annotations

from django.db import models


class Category(models.Model):
    """
    Legacy incident category. The comprehensive form records free-text
    `ovr_category` on the incident; this list still backs `incident.category`.
    """
    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True, default="")
    is_active = models.BooleanField(default=True, db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "categories_category"
        verbose_name_plural = "categories"

    def __str__(self) -> str:
        return self.name
