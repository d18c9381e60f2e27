# ovr_core/facilities/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from ovr_core.facilities.models import Facility


class FacilitySerializer(serializers.ModelSerializer):
    class Meta:
        model = Facility
        fields = ["id", "name_en", "name_ar", "code", "is_active", "created_at", "updated_at"]
        read_only_fields = fields


class FacilitySummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Facility
        fields = ["id", "name_en", "name_ar", "code"]
        read_only_fields = fields


class FacilityActivationSerializer(serializers.Serializer):
    is_active = serializers.BooleanField()
