# ovr_core/comments/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from ovr_core.comments.models import Comment


class CommentSerializer(serializers.ModelSerializer):
    incident_id = serializers.IntegerField(read_only=True)
    author_id = serializers.IntegerField(read_only=True, allow_null=True)
    author_name = serializers.SerializerMethodField()
    author_email = serializers.SerializerMethodField()

    class Meta:
        model = Comment
        fields = [
            "id",
            "incident_id",
            "author_id",
            "author_name",
            "author_email",
            "content",
            "kind",
            "created_at",
        ]
        read_only_fields = fields

    def get_author_name(self, obj) -> str | None:
        if obj.author is None:
            return None
        return obj.author.get_full_name() or obj.author.email

    def get_author_email(self, obj) -> str | None:
        return obj.author.email if obj.author is not None else None


class CommentCreateSerializer(serializers.Serializer):
    content = serializers.CharField(allow_blank=True, trim_whitespace=False)
