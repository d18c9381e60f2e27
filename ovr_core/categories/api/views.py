# ovr_core/categories/api/views.py
from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from ovr_core.categories.api.serializers import CategorySerializer
from ovr_core.categories.selectors import category_by_id, list_active_categories


class CategoryViewSet(viewsets.ViewSet):
    """Public, read-only list used by the reporting form."""

    permission_classes = [AllowAny]
    authentication_classes: list = []

    @extend_schema(tags=["Reference data"], responses={200: CategorySerializer(many=True)})
    def list(self, request):
        qs = list_active_categories()
        return Response(CategorySerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Reference data"], responses={200: CategorySerializer})
    def retrieve(self, request, pk=None):
        obj = category_by_id(category_id=pk)
        return Response(CategorySerializer(obj).data, status=status.HTTP_200_OK)
