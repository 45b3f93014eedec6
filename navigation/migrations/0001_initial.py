import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="MenuItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title_en", models.CharField(max_length=200)),
                ("title_bn", models.CharField(max_length=200)),
                (
                    "slug",
                    models.CharField(
                        blank=True,
                        help_text="Derived, e.g. '/about/team'. Empty for external links.",
                        max_length=300,
                        null=True,
                        unique=True,
                    ),
                ),
                ("is_external_link", models.BooleanField(default=False)),
                (
                    "url",
                    models.CharField(
                        blank=True,
                        help_text="External URL, e.g. 'https://example.org'.",
                        max_length=512,
                        null=True,
                        validators=[
                            django.core.validators.RegexValidator(
                                message="Invalid URL format",
                                regex="^(https?://)?([\\da-zA-Z.-]+)\\.([a-zA-Z.]{2,6})([/\\w .\\-?=&%#~+]*)/?$",
                            )
                        ],
                    ),
                ),
                (
                    "order",
                    models.PositiveIntegerField(
                        default=0, validators=[django.core.validators.MaxValueValidator(999999)]
                    ),
                ),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "parent",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="children",
                        to="navigation.menuitem",
                    ),
                ),
            ],
            options={
                "verbose_name": "Menu Item",
                "verbose_name_plural": "Menu Items",
                "ordering": ["order", "id"],
                "indexes": [
                    models.Index(fields=["parent", "order"], name="menu_parent_order_idx"),
                    models.Index(fields=["is_active"], name="menu_is_active_idx"),
                ],
            },
        ),
    ]
