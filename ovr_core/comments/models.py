# ovr_core/comments/models.py
from __future__ import annotations

from django.conf import settings
from django.db import models


class CommentKind(models.TextChoices):
    COMMENT = "comment", "Comment"
    SYSTEM = "system", "System"


class Comment(models.Model):
    """
    Discussion entry on an incident. Append-only: rows are never edited and
    only disappear together with their incident.
    """
    incident = models.ForeignKey("incidents.Incident", on_delete=models.CASCADE, related_name="comments")
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="incident_comments",
        null=True,
        blank=True,
    )
    content = models.TextField()
    kind = models.CharField(max_length=16, choices=CommentKind.choices, default=CommentKind.COMMENT)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = "comments_comment"
        ordering = ["created_at", "id"]

    def __str__(self) -> str:
        return f"Comment {self.pk} on incident {self.incident_id}"
