"""API views for admin-editable page content."""

from __future__ import annotations

from rest_framework import permissions, status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.users.permissions import IsHallManager

from .serializers import PageChangesSerializer, PageElementSerializer
from .services import apply_changes, get_page_elements


class PageContentView(APIView):
    """Public element map used to render a page."""

    permission_classes = [permissions.AllowAny]

    def get(self, request, page):  # type: ignore
        return Response({"page": page, "elements": get_page_elements(page)})


class PageChangesView(APIView):
    """Staff-only batch edit of a page's elements."""

    permission_classes = [IsHallManager]

    def post(self, request, page):  # type: ignore
        serializer = PageChangesSerializer(data=request.data, context={"page": page})
        serializer.is_valid(raise_exception=True)
        elements = apply_changes(serializer.validated_data["commands"], user=request.user)
        return Response(
            {
                "page": page,
                "updated": PageElementSerializer(elements, many=True).data,
                "elements": get_page_elements(page),
            },
            status=status.HTTP_200_OK,
        )
