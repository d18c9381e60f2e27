# ovr_core/incidents/filters.py
from __future__ import annotations

import django_filters
from django.db.models import Q

from ovr_core.incidents.models import Incident, IncidentPriority, IncidentStatus

ALL = "all"


class IncidentFilter(django_filters.FilterSet):
    """
    Query parameters of the incident list. "all" on any parameter means no
    filtering on it.
    """

    status = django_filters.ChoiceFilter(choices=[*IncidentStatus.choices, (ALL, "All")], method="filter_choice")
    priority = django_filters.ChoiceFilter(choices=[*IncidentPriority.choices, (ALL, "All")], method="filter_choice")
    facility_id = django_filters.CharFilter(method="filter_reference")
    category_id = django_filters.CharFilter(method="filter_reference")
    is_flagged = django_filters.BooleanFilter(field_name="is_flagged")
    date_from = django_filters.DateFilter(field_name="incident_date", lookup_expr="gte")
    date_to = django_filters.DateFilter(field_name="incident_date", lookup_expr="lte")
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = Incident
        fields: list = []

    def filter_choice(self, queryset, name, value):
        if not value or value == ALL:
            return queryset
        return queryset.filter(**{name: value})

    def filter_reference(self, queryset, name, value):
        value = (value or "").strip()
        if not value or value.lower() == ALL:
            return queryset
        if not value.isdigit():
            # Unknown ids match nothing rather than erroring.
            return queryset.none()
        return queryset.filter(**{name: int(value)})

    def filter_search(self, queryset, name, value):
        value = (value or "").strip()
        if not value:
            return queryset
        return queryset.filter(Q(ovr_id__icontains=value) | Q(description__icontains=value))
