# ovr_core/iam/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from ovr_core.facilities.api.serializers import FacilitySummarySerializer
from ovr_core.iam.models import RegistrationStatus, UserRegistration, UserRole


# -------------------------
# Auth
# -------------------------
class RegisterRequestSerializer(serializers.Serializer):
    email = serializers.EmailField()
    first_name = serializers.CharField(max_length=150)
    last_name = serializers.CharField(max_length=150)
    facility_id = serializers.IntegerField()
    position = serializers.CharField(max_length=128, required=False, allow_blank=True, default="")
    password = serializers.CharField(min_length=8, write_only=True, trim_whitespace=False)


class RegisterResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    message = serializers.CharField()
    registration_id = serializers.IntegerField()


class LoginRequestSerializer(serializers.Serializer):
    email = serializers.CharField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)


class DetailResponseSerializer(serializers.Serializer):
    detail = serializers.CharField()


# -------------------------
# Users
# -------------------------
class UserSerializer(serializers.Serializer):
    """
    Read shape for users: auth user fields plus the profile, never the password.
    `total_incidents` is present when the queryset was annotated.
    """
    id = serializers.IntegerField(read_only=True)
    email = serializers.EmailField(read_only=True)
    first_name = serializers.CharField(read_only=True)
    last_name = serializers.CharField(read_only=True)
    is_active = serializers.BooleanField(read_only=True)
    last_login = serializers.DateTimeField(read_only=True)
    date_joined = serializers.DateTimeField(read_only=True)

    role = serializers.SerializerMethodField()
    facility_id = serializers.SerializerMethodField()
    facility = serializers.SerializerMethodField()
    position = serializers.SerializerMethodField()
    is_approved = serializers.SerializerMethodField()
    auth_provider = serializers.SerializerMethodField()
    total_incidents = serializers.SerializerMethodField()

    def _profile(self, obj):
        return getattr(obj, "profile", None)

    def get_role(self, obj) -> str:
        profile = self._profile(obj)
        if profile is None:
            return UserRole.ADMIN if obj.is_superuser else UserRole.USER
        return profile.role

    def get_facility_id(self, obj) -> int | None:
        profile = self._profile(obj)
        return profile.facility_id if profile else None

    def get_facility(self, obj) -> dict | None:
        profile = self._profile(obj)
        if profile is None or profile.facility is None:
            return None
        return FacilitySummarySerializer(profile.facility).data

    def get_position(self, obj) -> str:
        profile = self._profile(obj)
        return profile.position if profile else ""

    def get_is_approved(self, obj) -> bool:
        profile = self._profile(obj)
        return bool(profile.is_approved) if profile else True

    def get_auth_provider(self, obj) -> str | None:
        profile = self._profile(obj)
        return profile.auth_provider if profile else None

    def get_total_incidents(self, obj) -> int | None:
        return getattr(obj, "total_incidents", None)


class UserUpdateSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=UserRole.choices, required=False)
    facility_id = serializers.IntegerField(required=False)
    is_active = serializers.BooleanField(required=False)
    first_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    last_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    position = serializers.CharField(max_length=128, required=False, allow_blank=True)


# -------------------------
# Registrations
# -------------------------
class RegistrationSerializer(serializers.ModelSerializer):
    facility_id = serializers.IntegerField(read_only=True)
    facility = FacilitySummarySerializer(read_only=True)
    reviewed_by_id = serializers.IntegerField(read_only=True, allow_null=True)

    class Meta:
        model = UserRegistration
        fields = [
            "id",
            "email",
            "first_name",
            "last_name",
            "facility_id",
            "facility",
            "position",
            "status",
            "requested_at",
            "reviewed_at",
            "reviewed_by_id",
            "rejection_reason",
        ]
        read_only_fields = fields


class RegistrationRejectSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default="")


class RegistrationStatusQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=[*RegistrationStatus.values, "all"],
        required=False,
    )
