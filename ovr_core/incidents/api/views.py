# ovr_core/incidents/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from ovr_core.audit.services import request_meta
from ovr_core.comments.api.serializers import CommentCreateSerializer, CommentSerializer
from ovr_core.comments.selectors import list_comments
from ovr_core.comments.services import CommentService
from ovr_core.common.api.pagination import paginate
from ovr_core.iam.principal import get_principal
from ovr_core.incidents.api.serializers import (
    ClosureReasonSerializer,
    IncidentEditSerializer,
    IncidentMetricsSerializer,
    IncidentSerializer,
    IncidentSubmitSerializer,
    IncidentUpdateSerializer,
    PublicSubmitResponseSerializer,
)
from ovr_core.incidents.models import Incident
from ovr_core.incidents.permissions import IncidentPermission
from ovr_core.incidents.selectors import incident_for_principal, incident_metrics, list_incidents
from ovr_core.incidents.services import IncidentService, IncidentUpdate

LIST_PARAMETERS = [
    OpenApiParameter(name="status", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
    OpenApiParameter(name="facility_id", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
    OpenApiParameter(name="category_id", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
    OpenApiParameter(name="priority", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
    OpenApiParameter(name="is_flagged", type=OpenApiTypes.BOOL, location=OpenApiParameter.QUERY, required=False),
    OpenApiParameter(name="date_from", type=OpenApiTypes.DATE, location=OpenApiParameter.QUERY, required=False),
    OpenApiParameter(name="date_to", type=OpenApiTypes.DATE, location=OpenApiParameter.QUERY, required=False),
    OpenApiParameter(
        name="search",
        type=OpenApiTypes.STR,
        location=OpenApiParameter.QUERY,
        required=False,
        description="Matches OVR id or description.",
    ),
]


class PublicIncidentSubmitView(APIView):
    """
    Anonymous reporting form. Any credentials the client sends are ignored:
    public reports never carry a reporter account.
    """
    permission_classes = [AllowAny]
    authentication_classes: list = []

    @extend_schema(
        tags=["Incidents"],
        request=IncidentSubmitSerializer,
        responses={201: PublicSubmitResponseSerializer},
    )
    def post(self, request):
        s = IncidentSubmitSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        incident = IncidentService.submit(
            data=s.to_submission(allow_priority=False),
            principal=None,
            meta=request_meta(request),
        )
        return Response(
            {
                "success": True,
                "ovr_id": incident.ovr_id,
                "message": "Incident report submitted successfully.",
            },
            status=status.HTTP_201_CREATED,
        )


class IncidentViewSet(viewsets.ViewSet):
    permission_classes = [IncidentPermission]
    serializer_class = IncidentSerializer
    queryset = Incident.objects.none()

    def _scoped(self, request, pk) -> Incident:
        # Facility access is settled before the body is validated.
        return incident_for_principal(incident_id=pk, principal=get_principal(request))

    def _detail(self, request, pk) -> Response:
        return Response(IncidentSerializer(self._scoped(request, pk)).data, status=status.HTTP_200_OK)

    # ------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------
    @extend_schema(tags=["Incidents"], parameters=LIST_PARAMETERS, responses={200: IncidentSerializer(many=True)})
    def list(self, request):
        qs = list_incidents(principal=get_principal(request), params=request.query_params)
        return paginate(request, qs, IncidentSerializer)

    @extend_schema(tags=["Incidents"], responses={200: IncidentSerializer})
    def retrieve(self, request, pk=None):
        return self._detail(request, pk)

    @extend_schema(tags=["Incidents"], responses={200: IncidentMetricsSerializer})
    @action(detail=False, methods=["get"], url_path="metrics")
    def metrics(self, request):
        data = incident_metrics(principal=get_principal(request))
        return Response(IncidentMetricsSerializer(data).data, status=status.HTTP_200_OK)

    # ------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------
    @extend_schema(tags=["Incidents"], request=IncidentSubmitSerializer, responses={201: IncidentSerializer})
    def create(self, request):
        principal = get_principal(request)
        s = IncidentSubmitSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        incident = IncidentService.submit(
            data=s.to_submission(),
            principal=principal,
            actor=request.user,
            meta=request_meta(request),
        )
        return Response(
            IncidentSerializer(incident_for_principal(incident_id=incident.id, principal=principal)).data,
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(tags=["Incidents"], request=IncidentUpdateSerializer, responses={200: IncidentSerializer})
    def partial_update(self, request, pk=None):
        principal = get_principal(request)
        self._scoped(request, pk)

        s = IncidentUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        IncidentService.update(
            incident_id=pk,
            patch=IncidentUpdate(**s.validated_data),
            principal=principal,
            actor=request.user,
            meta=request_meta(request),
        )
        return self._detail(request, pk)

    @extend_schema(tags=["Incidents"], responses={204: None})
    def destroy(self, request, pk=None):
        IncidentService.delete(
            incident_id=pk,
            principal=get_principal(request),
            actor=request.user,
            meta=request_meta(request),
        )
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(tags=["Incidents"], request=IncidentEditSerializer, responses={200: IncidentSerializer})
    @action(detail=True, methods=["patch"], url_path="edit")
    def edit(self, request, pk=None):
        principal = get_principal(request)
        self._scoped(request, pk)

        s = IncidentEditSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        IncidentService.edit_field(
            incident_id=pk,
            field_name=s.validated_data["field"],
            value=s.validated_data["value"],
            comment=s.validated_data["comment"],
            principal=principal,
            actor=request.user,
            meta=request_meta(request),
        )
        return self._detail(request, pk)

    # ------------------------------------------------------------
    # Closure workflow
    # ------------------------------------------------------------
    @extend_schema(tags=["Incidents"], request=ClosureReasonSerializer, responses={200: IncidentSerializer})
    @action(detail=True, methods=["post"], url_path="request-closure")
    def request_closure(self, request, pk=None):
        s = ClosureReasonSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        IncidentService.request_closure(
            incident_id=pk,
            reason=s.validated_data["reason"],
            principal=get_principal(request),
            actor=request.user,
            meta=request_meta(request),
        )
        return self._detail(request, pk)

    @extend_schema(tags=["Incidents"], request=None, responses={200: IncidentSerializer})
    @action(detail=True, methods=["post"], url_path="approve-closure")
    def approve_closure(self, request, pk=None):
        IncidentService.approve_closure(
            incident_id=pk,
            principal=get_principal(request),
            actor=request.user,
            meta=request_meta(request),
        )
        return self._detail(request, pk)

    @extend_schema(tags=["Incidents"], request=ClosureReasonSerializer, responses={200: IncidentSerializer})
    @action(detail=True, methods=["post"], url_path="reject-closure")
    def reject_closure(self, request, pk=None):
        s = ClosureReasonSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        IncidentService.reject_closure(
            incident_id=pk,
            reason=s.validated_data["reason"],
            principal=get_principal(request),
            actor=request.user,
            meta=request_meta(request),
        )
        return self._detail(request, pk)

    # ------------------------------------------------------------
    # Discussion
    # ------------------------------------------------------------
    @extend_schema(
        tags=["Incidents"],
        methods=["GET"],
        responses={200: CommentSerializer(many=True)},
    )
    @extend_schema(
        tags=["Incidents"],
        methods=["POST"],
        request=CommentCreateSerializer,
        responses={201: CommentSerializer},
    )
    @action(detail=True, methods=["get", "post"], url_path="comments")
    def comments(self, request, pk=None):
        principal = get_principal(request)
        incident = self._scoped(request, pk)

        if request.method == "GET":
            qs = list_comments(incident_id=incident.id)
            return Response(CommentSerializer(qs, many=True).data, status=status.HTTP_200_OK)

        s = CommentCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        comment = CommentService.add(
            incident_id=incident.id,
            principal=principal,
            author=request.user,
            content=s.validated_data["content"],
            meta=request_meta(request),
        )
        return Response(CommentSerializer(comment).data, status=status.HTTP_201_CREATED)
