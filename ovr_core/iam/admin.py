# ovr_core/iam/admin.py
from __future__ import annotations

from django.contrib import admin

from ovr_core.iam.models import UserProfile, UserRegistration


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "role", "facility", "auth_provider", "is_approved", "created_at")
    list_filter = ("role", "auth_provider", "facility")
    search_fields = ("user__username", "user__email")
    autocomplete_fields = ("user",)
    ordering = ("-created_at",)


@admin.register(UserRegistration)
class UserRegistrationAdmin(admin.ModelAdmin):
    list_display = ("email", "first_name", "last_name", "facility", "status", "requested_at", "reviewed_by")
    list_filter = ("status", "facility")
    search_fields = ("email", "first_name", "last_name")
    exclude = ("password",)
    readonly_fields = ("requested_at", "reviewed_at", "reviewed_by")
    ordering = ("-requested_at",)
