import json

import pytest
from django.urls import reverse

from content.models import Page

from .factories import LayoutFactory, PageFactory

pytestmark = pytest.mark.django_db


class TestPublicPages:
    def test_detail_accepts_nested_slugs(self, api_client):
        page = PageFactory(slug="about/team")

        response = api_client.get("/api/public/pages/about/team/")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["page"]["id"] == page.id
        assert body["page"]["slug"] == "about/team"
        assert body["page"]["layout"]["identifier"] == page.layout.identifier

    def test_draft_is_404_with_envelope(self, api_client):
        PageFactory(slug="about", status=Page.Status.DRAFT)

        response = api_client.get("/api/public/pages/about")

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Page not found"}

    def test_list_shows_published_only(self, api_client):
        PageFactory(slug="about")
        PageFactory(slug="hidden", is_active=False)
        PageFactory(slug="draft", status=Page.Status.DRAFT)

        response = api_client.get(reverse("public:page_list"))

        assert [page["slug"] for page in response.json()["pages"]] == ["about"]


class TestPageAdmin:
    def test_requires_admin(self, api_client, editor_api):
        assert api_client.get(reverse("content:page_list")).status_code == 401
        response = editor_api.get(reverse("content:page_list"))
        assert response.status_code == 403
        assert response.json()["success"] is False

    def test_create(self, admin_api, cms_admin):
        layout = LayoutFactory()

        response = admin_api.post(
            reverse("content:page_create"),
            {"name": "About", "titleEn": "About us", "slug": "About", "layoutId": layout.pk},
            format="json",
        )

        assert response.status_code == 201
        page = Page.objects.get(slug="about")
        assert page.created_by == cms_admin
        assert response.json()["page"]["layout"]["id"] == layout.pk

    def test_create_requires_fields(self, admin_api):
        response = admin_api.post(reverse("content:page_create"), {}, format="json")

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Invalid input."
        assert set(body["errors"]) == {"name", "slug", "layout"}

    def test_create_duplicate_slug(self, admin_api):
        PageFactory(slug="/about")
        layout = LayoutFactory()

        response = admin_api.post(
            reverse("content:page_create"),
            {"name": "About", "slug": "about", "layout": layout.pk},
            format="json",
        )

        assert response.status_code == 409
        assert "slug" in response.json()["errors"]

    def test_update_status(self, admin_api):
        page = PageFactory(status=Page.Status.DRAFT)

        response = admin_api.patch(
            reverse("content:page_status", args=[page.pk]),
            {"status": "Published"},
            format="json",
        )

        assert response.status_code == 200
        page.refresh_from_db()
        assert page.status == Page.Status.PUBLISHED

    def test_invalid_status(self, admin_api):
        page = PageFactory()
        response = admin_api.patch(
            reverse("content:page_status", args=[page.pk]), {"status": "gone"}, format="json"
        )
        assert response.status_code == 400

    def test_template_roundtrip(self, admin_api):
        page = PageFactory()
        template = {"html": "<p>Hi</p>", "css": "p{}"}

        response = admin_api.put(
            reverse("content:page_template_update", args=[page.pk]),
            {"template": template, "language": "bn"},
            format="json",
        )
        assert response.status_code == 200

        response = admin_api.get(reverse("content:page_template", args=[page.pk, "bn"]))
        assert response.json()["template"] == template

    def test_template_language_must_be_known(self, admin_api):
        page = PageFactory()
        response = admin_api.get(reverse("content:page_template", args=[page.pk, "fr"]))
        assert response.status_code == 400

    def test_chunked_template_upload(self, admin_api):
        page = PageFactory()
        payload = json.dumps({"html": "<section>" + "x" * 50 + "</section>"})
        url = reverse("content:page_template_chunk", args=[page.pk])

        first = admin_api.put(
            url,
            {"chunk": payload[:30], "index": 0, "total": 2, "language": "en"},
            format="json",
        )
        assert first.json()["message"] == "Chunk 1 of 2 received"

        second = admin_api.put(
            url,
            {"chunk": payload[30:], "index": 1, "total": 2, "language": "en"},
            format="json",
        )
        assert second.status_code == 200
        page.refresh_from_db()
        assert page.template_en == json.loads(payload)

    def test_delete(self, admin_api):
        page = PageFactory()
        response = admin_api.delete(reverse("content:page_delete", args=[page.pk]))
        assert response.status_code == 200
        assert not Page.objects.filter(pk=page.pk).exists()

    def test_missing_page(self, admin_api):
        response = admin_api.get(reverse("content:page_detail", args=[404]))
        assert response.status_code == 404
        assert response.json()["message"] == "Page not found"
