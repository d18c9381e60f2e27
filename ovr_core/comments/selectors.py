# ovr_core/comments/selectors.py
from __future__ import annotations

from django.db.models import QuerySet

from ovr_core.comments.models import Comment


def list_comments(*, incident_id) -> QuerySet[Comment]:
    """Oldest first, with the author joined for display."""
    return (
        Comment.objects.filter(incident_id=incident_id)
        .select_related("author")
        .order_by("created_at", "id")
    )
