# ovr_core/categories/selectors.py
from __future__ import annotations

from django.db.models import QuerySet
from rest_framework.exceptions import NotFound

from ovr_core.categories.models import Category


def list_active_categories() -> QuerySet[Category]:
    return Category.objects.filter(is_active=True).order_by("name")


def category_by_id(*, category_id: int) -> Category:
    try:
        return Category.objects.get(id=category_id)
    except (Category.DoesNotExist, ValueError, TypeError):
        raise NotFound("Category not found.")


def category_for_name(name: str | None) -> Category | None:
    """
    Case-insensitive match on an active category name; falls back to the
    first active category (by id) when nothing matches.
    """
    active = Category.objects.filter(is_active=True)
    if name:
        match = active.filter(name__iexact=name.strip()).first()
        if match is not None:
            return match
    return active.order_by("id").first()
