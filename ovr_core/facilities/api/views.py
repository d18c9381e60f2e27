# ovr_core/facilities/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.response import Response

from ovr_core.audit.services import request_meta
from ovr_core.facilities.api.permissions import FacilityPermission
from ovr_core.facilities.api.serializers import FacilityActivationSerializer, FacilitySerializer
from ovr_core.facilities.selectors import facility_by_id, list_facilities
from ovr_core.facilities.services import FacilityService


def _truthy(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


class FacilityViewSet(viewsets.ViewSet):
    """
    Reads are public (the anonymous reporting form needs them).
    The activation toggle is the only write and is admin-only.
    """

    permission_classes = [FacilityPermission]

    @extend_schema(
        tags=["Reference data"],
        responses={200: FacilitySerializer(many=True)},
        parameters=[
            OpenApiParameter(
                name="active_only",
                type=OpenApiTypes.BOOL,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Only active facilities (default true).",
            ),
        ],
    )
    def list(self, request):
        active_only = _truthy(request.query_params.get("active_only", "1"))
        qs = list_facilities(active_only=active_only)
        return Response(FacilitySerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Reference data"], responses={200: FacilitySerializer})
    def retrieve(self, request, pk=None):
        obj = facility_by_id(facility_id=pk)
        return Response(FacilitySerializer(obj).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Reference data"], request=FacilityActivationSerializer, responses={200: FacilitySerializer})
    def partial_update(self, request, pk=None):
        s = FacilityActivationSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        obj = FacilityService.set_active(
            facility_id=pk,
            is_active=s.validated_data["is_active"],
            actor=request.user,
            meta=request_meta(request),
        )
        return Response(FacilitySerializer(obj).data, status=status.HTTP_200_OK)
