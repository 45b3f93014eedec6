# backend/content/models.py
from django.conf import settings
from django.core.validators import MinLengthValidator, RegexValidator
from django.db import models

LANGUAGES = ("en", "bn")

page_slug_validator = RegexValidator(
    regex=r"^/*[a-z0-9-]+(?:/[a-z0-9-]+)*/*$",
    message="Slug may only contain lowercase letters, digits, hyphens and '/' between segments.",
)


class Layout(models.Model):
    name = models.CharField(max_length=100)
    identifier = models.CharField(
        max_length=100,
        unique=True,
        validators=[
            RegexValidator(
                regex=r"^[a-z0-9-]+$",
                message="Identifier format is invalid",
            )
        ],
    )
    content = models.TextField()
    is_active = models.BooleanField(default=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_layouts",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        verbose_name = "Layout"
        verbose_name_plural = "Layouts"

    def __str__(self) -> str:
        return self.identifier


class Page(models.Model):
    """
    A public page. Its slug is expected to match a menu item's slug (see
    CMS_PAGE_SLUG_POLICY); only active + published pages are served.

    template_en / template_bn hold the page-builder payload:
    {"html": "...", "css": "...", "js": "...", "assets": [...]}.
    """

    class Status(models.TextChoices):
        DRAFT = "draft", "Draft"
        PUBLISHED = "published", "Published"
        ARCHIVED = "archived", "Archived"

    name = models.CharField(max_length=100, validators=[MinLengthValidator(2)])
    title_en = models.CharField(max_length=200, blank=True)
    title_bn = models.CharField(max_length=200, blank=True)
    slug = models.CharField(
        max_length=300,
        unique=True,
        validators=[page_slug_validator],
        help_text="e.g. 'about/team'. Surrounding slashes are ignored when resolving.",
    )
    layout = models.ForeignKey(
        Layout,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="pages",
    )

    template_en = models.JSONField(null=True, blank=True)
    template_bn = models.JSONField(null=True, blank=True)

    status = models.CharField(
        max_length=10,
        choices=Status.choices,
        default=Status.DRAFT,
    )
    is_active = models.BooleanField(default=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_pages",
    )
    last_modified_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="modified_pages",
    )
    created_at = models.DateTimeField(auto_now_add=True, editable=False)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Page"
        verbose_name_plural = "Pages"
        indexes = [
            models.Index(fields=["slug", "is_active"], name="page_slug_active_idx"),
        ]

    def __str__(self) -> str:
        return self.slug

    @property
    def is_published(self) -> bool:
        return self.is_active and self.status == self.Status.PUBLISHED

    def template_for(self, language: str):
        return getattr(self, f"template_{language}")
