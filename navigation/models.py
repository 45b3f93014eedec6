# backend/navigation/models.py
from django.core.validators import MaxValueValidator, RegexValidator
from django.db import models

from .slugs import SLUG_MAX_LENGTH

# Scheme is optional: "example.org/about" is accepted the same as
# "https://example.org/about".
url_validator = RegexValidator(
    regex=r"^(https?://)?([\da-zA-Z.-]+)\.([a-zA-Z.]{2,6})([/\w .\-?=&%#~+]*)/?$",
    message="Invalid URL format",
)

ORDER_MAX = 999999
TITLE_MAX_LENGTH = 200


class MenuItem(models.Model):
    """
    One node of the site menu tree.

    Slugs are derived from title_en and the parent's slug by
    navigation.services.MenuTreeService; don't assign them by hand.
    External links (is_external_link or a url) carry no slug.
    """

    title_en = models.CharField(max_length=TITLE_MAX_LENGTH)
    title_bn = models.CharField(max_length=TITLE_MAX_LENGTH)
    slug = models.CharField(
        max_length=SLUG_MAX_LENGTH,
        unique=True,
        null=True,
        blank=True,
        help_text="Derived, e.g. '/about/team'. Empty for external links.",
    )

    parent = models.ForeignKey(
        "self",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="children",
    )

    is_external_link = models.BooleanField(default=False)
    url = models.CharField(
        max_length=512,
        null=True,
        blank=True,
        validators=[url_validator],
        help_text="External URL, e.g. 'https://example.org'.",
    )
    order = models.PositiveIntegerField(
        default=0,
        validators=[MaxValueValidator(ORDER_MAX)],
    )
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True, editable=False)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["order", "id"]
        verbose_name = "Menu Item"
        verbose_name_plural = "Menu Items"
        indexes = [
            models.Index(fields=["parent", "order"], name="menu_parent_order_idx"),
            models.Index(fields=["is_active"], name="menu_is_active_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.title_en} ({self.slug or self.url or '-'})"

    @property
    def routes_externally(self) -> bool:
        return bool(self.is_external_link or self.url)
