"""API views for the form service."""
from __future__ import annotations

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.request import Request
from rest_framework.response import Response

from .models import Form
from .serializers import (
    FormSerializer,
    LayoutPreviewSerializer,
    PublishedFormSerializer,
    editor_payload,
    preview_payload,
)


class FormViewSet(viewsets.ModelViewSet):
    queryset = Form.objects.prefetch_related("cells").all()
    serializer_class = FormSerializer
    lookup_field = "slug"
    filter_backends = [SearchFilter, OrderingFilter]
    search_fields = ["title", "description", "slug"]
    ordering_fields = ["sort_order", "title", "created_at", "updated_at"]
    ordering = ["sort_order", "id"]

    @action(detail=True, methods=["get"], url_path="editor")
    def editor(self, request: Request, *args, **kwargs) -> Response:
        """Rebuild the editor's card list from the stored grid."""

        return Response(editor_payload(self.get_object()))

    @action(detail=True, methods=["get"], url_path="published")
    def published(self, request: Request, *args, **kwargs) -> Response:
        """Public definition of the form, grouped into rows."""

        return Response(PublishedFormSerializer(self.get_object()).data)

    @action(detail=False, methods=["post"], url_path="preview")
    def preview(self, request: Request, *args, **kwargs) -> Response:
        """Pack and validate a layout without saving it."""

        serializer = LayoutPreviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return Response(preview_payload(serializer.validated_data["cells"]), status=status.HTTP_200_OK)
