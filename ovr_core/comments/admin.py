from django.contrib import admin

from ovr_core.comments.models import Comment


@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = ("id", "incident", "author", "kind", "created_at")
    list_filter = ("kind",)
    search_fields = ("content", "incident__ovr_id", "author__email")
    readonly_fields = ("incident", "author", "content", "kind", "created_at")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
