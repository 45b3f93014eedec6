# backend/content/apps.py
from django.apps import AppConfig


class ContentConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "content"
    verbose_name = "Pages & Layouts"

    def ready(self):
        # Import signals so they get registered
        from . import signals  # noqa: F401
