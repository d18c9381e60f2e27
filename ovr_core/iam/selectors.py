# ovr_core/iam/selectors.py
from __future__ import annotations

from django.contrib.auth import get_user_model
from django.db.models import Count, QuerySet
from rest_framework.exceptions import NotFound

from ovr_core.iam.models import UserRegistration


def list_users() -> QuerySet:
    User = get_user_model()
    return (
        User.objects.select_related("profile", "profile__facility")
        .annotate(total_incidents=Count("reported_incidents", distinct=True))
        .order_by("-date_joined", "-id")
    )


def user_by_id(*, user_id):
    try:
        return list_users().get(id=user_id)
    except (get_user_model().DoesNotExist, ValueError, TypeError):
        raise NotFound("User not found.")


def list_registrations(*, status: str | None = None) -> QuerySet[UserRegistration]:
    qs = UserRegistration.objects.select_related("facility", "reviewed_by")
    if status and status != "all":
        qs = qs.filter(status=status)
    return qs.order_by("-requested_at", "-id")
