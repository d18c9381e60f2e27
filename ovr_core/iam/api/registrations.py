# ovr_core/iam/api/registrations.py

from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from ovr_core.audit.services import request_meta
from ovr_core.common.api.pagination import paginate
from ovr_core.common.permissions import AdminOnlyPermission
from ovr_core.iam.api.serializers import (
    RegistrationRejectSerializer,
    RegistrationSerializer,
    RegistrationStatusQuerySerializer,
    UserSerializer,
)
from ovr_core.iam.selectors import list_registrations
from ovr_core.iam.services.registration import RegistrationService


class RegistrationViewSet(viewsets.ViewSet):
    """
    Admin review queue for account requests.
    """
    permission_classes = [AdminOnlyPermission]

    @extend_schema(
        tags=["Registrations"],
        responses={200: RegistrationSerializer(many=True)},
        parameters=[
            OpenApiParameter(
                name="status",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                required=False,
                description="pending | approved | rejected | all (default all).",
            ),
        ],
    )
    def list(self, request):
        q = RegistrationStatusQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        qs = list_registrations(status=q.validated_data.get("status"))
        return paginate(request, qs, RegistrationSerializer)

    @extend_schema(tags=["Registrations"], request=None, responses={200: RegistrationSerializer})
    @action(detail=True, methods=["post"], url_path="approve")
    def approve(self, request, pk=None):
        registration, user = RegistrationService.approve(
            registration_id=pk,
            actor=request.user,
            meta=request_meta(request),
        )
        return Response(
            {
                "success": True,
                "message": "Registration approved and user account created",
                "registration": RegistrationSerializer(registration).data,
                "user": UserSerializer(user).data,
            },
            status=status.HTTP_200_OK,
        )

    @extend_schema(tags=["Registrations"], request=RegistrationRejectSerializer, responses={200: RegistrationSerializer})
    @action(detail=True, methods=["post"], url_path="reject")
    def reject(self, request, pk=None):
        s = RegistrationRejectSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        registration = RegistrationService.reject(
            registration_id=pk,
            actor=request.user,
            reason=s.validated_data.get("reason"),
            meta=request_meta(request),
        )
        return Response(
            {
                "success": True,
                "message": "Registration rejected",
                "registration": RegistrationSerializer(registration).data,
            },
            status=status.HTTP_200_OK,
        )
