# ovr_core/facilities/admin.py
from django.contrib import admin

from ovr_core.facilities.models import Facility


@admin.register(Facility)
class FacilityAdmin(admin.ModelAdmin):
    list_display = ("code", "name_en", "name_ar", "is_active", "created_at")
    list_filter = ("is_active",)
    search_fields = ("code", "name_en", "name_ar")
    ordering = ("name_en",)
