# backend/content/services.py
import logging

from django.conf import settings
from django.db import IntegrityError, transaction

from core.exceptions import DuplicateError, NotFoundError, ValidationError
from navigation.models import MenuItem
from navigation.slugs import normalize_slug

from .models import Layout, Page
from .repositories import slug_variants

logger = logging.getLogger(__name__)

SLUG_POLICY_STRICT = "strict"
SLUG_POLICY_ADVISORY = "advisory"


def get_page(page_id) -> Page:
    page = Page.objects.select_related("layout").filter(pk=page_id).first()
    if page is None:
        raise NotFoundError("Page not found")
    return page


def menu_slug_exists(slug: str) -> bool:
    normalized = normalize_slug(slug)
    return bool(normalized) and MenuItem.objects.filter(
        slug__in=slug_variants(normalized)
    ).exists()


def check_menu_slug(slug: str, policy: str | None = None):
    """
    A page is meant to sit behind a menu item with the same slug.
    "strict" rejects pages without one; "advisory" only logs.
    """
    policy = policy or getattr(settings, "CMS_PAGE_SLUG_POLICY", SLUG_POLICY_ADVISORY)
    if menu_slug_exists(slug):
        return
    if policy == SLUG_POLICY_STRICT:
        raise ValidationError("Page slug must match an existing menu slug", field="slug")
    logger.warning("Page slug %r does not match any menu item", slug)


def save_page(data: dict, user, page: Page | None = None) -> Page:
    """Create (page=None) or update a page from PageInputSerializer data."""
    if "layout_id" in data and not Layout.objects.filter(pk=data["layout_id"]).exists():
        raise ValidationError("Invalid layout selected", field="layout")

    if "slug" in data:
        normalized = normalize_slug(data["slug"])
        clash = Page.objects.filter(slug__in=slug_variants(normalized))
        if page is not None:
            clash = clash.exclude(pk=page.pk)
        if clash.exists():
            raise DuplicateError("A page with this slug already exists.", field="slug")
        check_menu_slug(data["slug"])

    created = page is None
    if created:
        page = Page(created_by=user)
    for name, value in data.items():
        setattr(page, name, value)
    page.last_modified_by = user

    try:
        with transaction.atomic():
            page.save()
    except IntegrityError as exc:
        raise DuplicateError("A page with this slug already exists.", field="slug") from exc

    logger.info("%s page %s (%s)", "Created" if created else "Updated", page.pk, page.slug)
    return get_page(page.pk)


def set_status(page: Page, status: str, user) -> Page:
    page.status = status
    page.last_modified_by = user
    page.save(update_fields=["status", "last_modified_by", "updated_at"])
    logger.info("Page %s is now %s", page.pk, status)
    return page


def set_template(page: Page, language: str, template: dict, user) -> Page:
    setattr(page, f"template_{language}", template)
    page.last_modified_by = user
    page.save(update_fields=[f"template_{language}", "last_modified_by", "updated_at"])
    logger.info("Updated %s template of page %s", language, page.pk)
    return page
