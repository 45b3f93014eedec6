# backend/navigation/slugs.py
"""
Slug helpers shared by the menu tree and the public page resolver.

Menu slugs are stored with a single leading slash ("/about/team"); page
slugs may drift ("about/team", "/about/team/"), so lookups always go through
normalize_slug() first.
"""
import re

from django.utils.text import slugify

from core.exceptions import ValidationError

SLUG_MAX_LENGTH = 300

_PUNCTUATION = re.compile(r"[\W_]+")
_REPEATED_SLASHES = re.compile(r"/{2,}")


def slugify_segment(title: str) -> str:
    """
    "About Us!" -> "about-us". Punctuation and whitespace become single
    hyphens; non-ASCII letters are transliterated or dropped.
    """
    return slugify(_PUNCTUATION.sub(" ", title or "")).strip("-")


def normalize_slug(raw: str | None) -> str:
    """Strip surrounding slashes and collapse repeated ones: "//a//b/" -> "a/b"."""
    if not raw:
        return ""
    return _REPEATED_SLASHES.sub("/", raw.strip()).strip("/")


def compose_slug(title: str, parent_slug: str | None = None) -> str:
    segment = slugify_segment(title)
    if not segment:
        raise ValidationError(
            "Title must contain at least one letter or digit.", field="title_en"
        )

    parent = normalize_slug(parent_slug)
    slug = f"/{parent}/{segment}" if parent else f"/{segment}"

    if len(slug) > SLUG_MAX_LENGTH:
        raise ValidationError(
            f"Slug may not be longer than {SLUG_MAX_LENGTH} characters.", field="slug"
        )
    return slug


def replace_prefix(slug: str | None, old_prefix: str, new_prefix: str) -> str | None:
    """
    Swap the leading `old_prefix` path of `slug` for `new_prefix`.

    Only whole path segments match, so "/about" is not a prefix of "/aboutus".
    Returns the slug unchanged when it does not start with `old_prefix`.
    """
    if not slug or not old_prefix:
        return slug
    old = "/" + normalize_slug(old_prefix)
    if slug != old and not slug.startswith(old + "/"):
        return slug

    rest = normalize_slug(slug[len(old):])
    head = normalize_slug(new_prefix)
    joined = "/".join(part for part in (head, rest) if part)
    return f"/{joined}" if joined else None
