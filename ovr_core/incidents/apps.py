# ovr_core/incidents/apps.py
from django.apps import AppConfig


class IncidentsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "ovr_core.incidents"
    label = "incidents"
