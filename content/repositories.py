# backend/content/repositories.py
from abc import ABC, abstractmethod
from typing import Iterable

from navigation.slugs import normalize_slug

from .models import Page


def slug_variants(normalized: str) -> list[str]:
    """The stored forms a normalized slug may have drifted into."""
    return [normalized, f"/{normalized}", f"{normalized}/", f"/{normalized}/"]


class PageRepository(ABC):
    @abstractmethod
    def find_published(self, normalized_slug: str):
        """Active + published page whose slug normalizes to normalized_slug, or None."""

    @abstractmethod
    def published_slugs(self) -> set[str]:
        """Normalized slugs of every active + published page."""


class DjangoPageRepository(PageRepository):
    def _published(self):
        return Page.objects.filter(is_active=True, status=Page.Status.PUBLISHED)

    def find_published(self, normalized_slug: str):
        if not normalized_slug:
            return None
        return (
            self._published()
            .filter(slug__in=slug_variants(normalized_slug))
            .select_related("layout")
            .first()
        )

    def published_slugs(self) -> set[str]:
        return {
            normalize_slug(slug)
            for slug in self._published().values_list("slug", flat=True)
        }


class InMemoryPageRepository(PageRepository):
    def __init__(self, pages: Iterable = ()):
        self.pages = list(pages)

    def _published(self):
        return [page for page in self.pages if page.is_published]

    def find_published(self, normalized_slug: str):
        if not normalized_slug:
            return None
        for page in self._published():
            if normalize_slug(page.slug) == normalized_slug:
                return page
        return None

    def published_slugs(self) -> set[str]:
        return {normalize_slug(page.slug) for page in self._published()}
