# backend/content/resolver.py
"""
Public page lookup by slug.

"/about/", "about" and "/about" all resolve to the page stored as "about"
(or "/about"); drafts, archived and inactive pages are reported as missing.
Serialized results are cached per normalized slug and dropped by
content.signals whenever a page, layout or menu item touching that slug
changes.
"""
import logging

from django.conf import settings
from django.core.cache import cache

from core.exceptions import NotFoundError
from navigation.slugs import normalize_slug

from .repositories import DjangoPageRepository, PageRepository
from .serializers import PublicPageSerializer

logger = logging.getLogger(__name__)

CACHE_PREFIX = "cms:page:"


def cache_key(slug: str) -> str:
    return f"{CACHE_PREFIX}{normalize_slug(slug)}"


def invalidate(*slugs):
    keys = [cache_key(slug) for slug in slugs if normalize_slug(slug)]
    if keys:
        cache.delete_many(keys)


def resolve_by_slug(raw_slug: str, repository: PageRepository | None = None):
    repository = repository or DjangoPageRepository()
    normalized = normalize_slug(raw_slug)
    page = repository.find_published(normalized)
    if page is None:
        logger.debug("No published page for slug %r", raw_slug)
        raise NotFoundError("Page not found")
    return page


def get_public_page(raw_slug: str, repository: PageRepository | None = None) -> dict:
    """Serialized page for the public API, served from cache when possible."""
    key = cache_key(raw_slug)
    data = cache.get(key)
    if data is not None:
        return data

    page = resolve_by_slug(raw_slug, repository)
    data = dict(PublicPageSerializer(page).data)
    cache.set(key, data, getattr(settings, "CMS_PAGE_CACHE_TIMEOUT", 300))
    return data
