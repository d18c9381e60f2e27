# ovr_core/categories/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from ovr_core.categories.models import Category


class CategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ["id", "name", "description", "is_active", "created_at"]
        read_only_fields = fields
