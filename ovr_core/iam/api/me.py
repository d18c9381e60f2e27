# ovr_core/iam/api/me.py

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from ovr_core.iam.api.serializers import UserSerializer
from ovr_core.iam.principal import get_principal


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: UserSerializer}, tags=["IAM"])
    def get(self, request):
        """
        Current user + profile. The principal is resolved here as well so a
        user without an access profile gets 401 rather than a half-empty body.
        """
        get_principal(request)
        return Response(UserSerializer(request.user).data, status=status.HTTP_200_OK)
