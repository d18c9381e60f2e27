# ovr_core/iam/api/users.py

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.response import Response

from ovr_core.audit.services import request_meta
from ovr_core.common.api.pagination import paginate
from ovr_core.common.permissions import AdminOnlyPermission
from ovr_core.iam.api.serializers import UserSerializer, UserUpdateSerializer
from ovr_core.iam.selectors import list_users, user_by_id
from ovr_core.iam.services.users import UserAdminService, UserUpdate


class UserViewSet(viewsets.ViewSet):
    """
    User administration (admin only).
    """
    permission_classes = [AdminOnlyPermission]

    @extend_schema(tags=["Users"], responses={200: UserSerializer(many=True)})
    def list(self, request):
        return paginate(request, list_users(), UserSerializer)

    @extend_schema(tags=["Users"], responses={200: UserSerializer})
    def retrieve(self, request, pk=None):
        return Response(UserSerializer(user_by_id(user_id=pk)).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Users"], request=UserUpdateSerializer, responses={200: UserSerializer})
    def partial_update(self, request, pk=None):
        s = UserUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        d = s.validated_data

        UserAdminService.update(
            user_id=pk,
            patch=UserUpdate(
                role=d.get("role"),
                facility_id=d.get("facility_id"),
                is_active=d.get("is_active"),
                first_name=d.get("first_name"),
                last_name=d.get("last_name"),
                position=d.get("position"),
            ),
            actor=request.user,
            meta=request_meta(request),
        )
        return Response(UserSerializer(user_by_id(user_id=pk)).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Users"], responses={204: None})
    def destroy(self, request, pk=None):
        UserAdminService.delete(user_id=pk, actor=request.user, meta=request_meta(request))
        return Response(status=status.HTTP_204_NO_CONTENT)
