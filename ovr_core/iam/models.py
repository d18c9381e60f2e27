# ovr_core/iam/models.py
from __future__ import annotations

from django.conf import settings
from django.db import models

from ovr_core.common.models import TimeStampedModel


class UserRole(models.TextChoices):
    ADMIN = "admin", "Admin"
    USER = "user", "User"


class AuthProvider(models.TextChoices):
    LOCAL = "local", "Local password"
    EXTERNAL = "external", "External identity provider"


class UserProfile(TimeStampedModel):
    """
    Domain attributes of an account. Credentials, active flag and last login
    stay on Django's auth user (username = lower-cased e-mail).
    """
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="profile",
    )

    role = models.CharField(max_length=16, choices=UserRole.choices, default=UserRole.USER, db_index=True)

    # Required for role=user, optional for admins
    facility = models.ForeignKey(
        "facilities.Facility",
        on_delete=models.PROTECT,
        related_name="user_profiles",
        null=True,
        blank=True,
    )
    position = models.CharField(max_length=128, blank=True, default="")

    is_approved = models.BooleanField(default=True)
    auth_provider = models.CharField(
        max_length=16,
        choices=AuthProvider.choices,
        default=AuthProvider.LOCAL,
    )

    class Meta:
        db_table = "iam_user_profile"

    def __str__(self) -> str:
        return f"{self.user} ({self.role})"


class RegistrationStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    APPROVED = "approved", "Approved"
    REJECTED = "rejected", "Rejected"


class UserRegistration(models.Model):
    """
    Account request awaiting one admin decision. Approval spawns a User.
    `password` holds a Django password hash, never the raw value.
    """
    email = models.EmailField(unique=True)
    first_name = models.CharField(max_length=150)
    last_name = models.CharField(max_length=150)

    facility = models.ForeignKey(
        "facilities.Facility",
        on_delete=models.PROTECT,
        related_name="registrations",
    )
    position = models.CharField(max_length=128, blank=True, default="")

    password = models.CharField(max_length=128)

    status = models.CharField(
        max_length=16,
        choices=RegistrationStatus.choices,
        default=RegistrationStatus.PENDING,
        db_index=True,
    )

    requested_at = models.DateTimeField(auto_now_add=True, db_index=True)
    reviewed_at = models.DateTimeField(null=True, blank=True)
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="reviewed_registrations",
        null=True,
        blank=True,
    )
    rejection_reason = models.TextField(blank=True, default="")

    class Meta:
        db_table = "iam_user_registration"

    def __str__(self) -> str:
        return f"{self.email} [{self.status}]"
