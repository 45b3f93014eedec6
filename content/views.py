# backend/content/views.py
from rest_framework import permissions, status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsCMSAdmin

from . import services
from .chunks import TemplateChunkBuffer
from .models import LANGUAGES, Page
from .resolver import get_public_page
from .serializers import (
    PageInputSerializer,
    PageSerializer,
    PageStatusSerializer,
    PublicPageListSerializer,
    TemplateChunkSerializer,
    TemplateSerializer,
)


# ---------------------------------------------------------------------------
# Public
# ---------------------------------------------------------------------------
class PublicPageListView(APIView):
    """
    GET /api/public/pages
    """

    permission_classes = [permissions.AllowAny]

    def get(self, request):
        pages = Page.objects.filter(
            is_active=True, status=Page.Status.PUBLISHED
        ).order_by("slug")
        serializer = PublicPageListSerializer(pages, many=True)
        return Response({"success": True, "pages": serializer.data})


class PublicPageDetailView(APIView):
    """
    GET /api/public/pages/<slug>   (slug may contain '/', e.g. about/team)
    """

    permission_classes = [permissions.AllowAny]

    def get(self, request, slug: str):
        return Response({"success": True, "page": get_public_page(slug)})


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------
class PageCreateView(APIView):
    permission_classes = [IsCMSAdmin]

    def post(self, request):
        serializer = PageInputSerializer(data=request.data, context={"creating": True})
        serializer.is_valid(raise_exception=True)
        page = services.save_page(serializer.validated_data, request.user)
        return Response(
            {
                "success": True,
                "message": "Page created successfully",
                "page": PageSerializer(page).data,
            },
            status=status.HTTP_201_CREATED,
        )


class PageListView(APIView):
    permission_classes = [IsCMSAdmin]

    def get(self, request):
        pages = Page.objects.select_related("layout").order_by("-created_at")
        data = PageSerializer(pages, many=True).data
        return Response({"success": True, "pages": data, "count": len(data)})


class PageDetailView(APIView):
    permission_classes = [IsCMSAdmin]

    def get(self, request, pk: int):
        page = services.get_page(pk)
        return Response({"success": True, "page": PageSerializer(page).data})


class PageUpdateView(APIView):
    permission_classes = [IsCMSAdmin]

    def put(self, request, pk: int):
        page = services.get_page(pk)
        serializer = PageInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        page = services.save_page(serializer.validated_data, request.user, page=page)
        return Response(
            {
                "success": True,
                "message": "Page updated successfully",
                "page": PageSerializer(page).data,
            }
        )


class PageStatusView(APIView):
    permission_classes = [IsCMSAdmin]

    def patch(self, request, pk: int):
        page = services.get_page(pk)
        serializer = PageStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        page = services.set_status(page, serializer.validated_data["status"], request.user)
        return Response(
            {
                "success": True,
                "message": "Status updated successfully",
                "page": PageSerializer(page).data,
            }
        )


class PageTemplateUpdateView(APIView):
    permission_classes = [IsCMSAdmin]

    def put(self, request, pk: int):
        page = services.get_page(pk)
        serializer = TemplateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        page = services.set_template(
            page,
            serializer.validated_data["language"],
            serializer.validated_data["template"],
            request.user,
        )
        return Response(
            {
                "success": True,
                "message": "Template updated successfully",
                "page": PageSerializer(page).data,
            }
        )


class PageTemplateChunkView(APIView):
    """
    PUT /api/pages/update-template/<id>/chunk
    Body: {"chunk": "...", "index": 0, "total": 3, "language": "en", "uploadId": "..."}
    """

    permission_classes = [IsCMSAdmin]

    def put(self, request, pk: int):
        page = services.get_page(pk)
        serializer = TemplateChunkSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        # Without an explicit upload id, one user has one upload per page/language.
        upload_id = data.get("uploadId") or f"user-{request.user.pk}"
        template = TemplateChunkBuffer().add(
            page.pk,
            data["language"],
            upload_id,
            data["index"],
            data["total"],
            data["chunk"],
        )
        if template is None:
            return Response(
                {
                    "success": True,
                    "message": f"Chunk {data['index'] + 1} of {data['total']} received",
                }
            )

        page = services.set_template(page, data["language"], template, request.user)
        return Response(
            {
                "success": True,
                "message": "Template updated successfully",
                "page": PageSerializer(page).data,
            }
        )


class PageTemplateDetailView(APIView):
    permission_classes = [IsCMSAdmin]

    def get(self, request, pk: int, language: str):
        if language not in LANGUAGES:
            raise ValidationError({"language": ["Invalid language specified"]})
        page = services.get_page(pk)
        return Response({"success": True, "template": page.template_for(language)})


class PageDeleteView(APIView):
    permission_classes = [IsCMSAdmin]

    def delete(self, request, pk: int):
        page = services.get_page(pk)
        page.delete()
        return Response({"success": True, "message": "Page deleted successfully"})
