import json
from pathlib import Path

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from content.models import LANGUAGES, Layout, Page

CONTENT_DIR = Path("content_json/pages")


class Command(BaseCommand):
    help = "Load/Update pages (and their layouts) from JSON files in content_json/pages"

    def add_arguments(self, parser):
        parser.add_argument(
            "--slug",
            help="Only load the JSON file whose page slug matches this one",
        )
        parser.add_argument(
            "--file",
            help="Path to a single JSON file to load (overrides the folder scan)",
        )
        parser.add_argument(
            "--user",
            help="Email of the user recorded as author (default: first superuser)",
        )

    def handle(self, *args, **options):
        target_slug = (options.get("slug") or "").strip("/")
        target_file = options.get("file")

        if target_file:
            files = [Path(target_file)]
        else:
            if not CONTENT_DIR.exists():
                self.stdout.write(self.style.ERROR(f"Folder not found: {CONTENT_DIR}"))
                return
            files = sorted(CONTENT_DIR.glob("*.json"))

        if not files:
            self.stdout.write(self.style.WARNING(f"No JSON files found in {CONTENT_DIR}"))
            return

        author = self._author(options.get("user"))
        loaded = 0

        for f in files:
            if not f.exists():
                self.stdout.write(self.style.WARNING(f"File not found: {f}"))
                continue

            data = json.loads(f.read_text(encoding="utf-8"))
            if not isinstance(data, dict) or not data.get("slug"):
                self.stdout.write(self.style.WARNING(f"Skipping {f}: missing 'slug'"))
                continue

            slug = data["slug"]
            if target_slug and slug.strip("/") != target_slug:
                continue

            defaults = {
                "name": data.get("name") or slug.strip("/") or "home",
                "title_en": data.get("title_en", ""),
                "title_bn": data.get("title_bn", ""),
                "status": data.get("status", Page.Status.DRAFT),
                "is_active": data.get("is_active", True),
                "last_modified_by": author,
            }

            layout = data.get("layout")
            if isinstance(layout, dict) and layout.get("identifier"):
                defaults["layout"], _ = Layout.objects.update_or_create(
                    identifier=layout["identifier"],
                    defaults={
                        "name": layout.get("name", layout["identifier"]),
                        "content": layout.get("content", ""),
                        "created_by": author,
                    },
                )
            elif layout is not None:
                self.stdout.write(
                    self.style.WARNING(f"Ignoring layout for {slug}: expected an object")
                )

            templates = data.get("template") or {}
            for language in LANGUAGES:
                template = templates.get(language)
                if template is None:
                    continue
                if not isinstance(template, dict):
                    self.stdout.write(
                        self.style.WARNING(
                            f"Skipping {language} template for {slug}: not an object"
                        )
                    )
                    continue
                defaults[f"template_{language}"] = template

            page, created = Page.objects.update_or_create(slug=slug, defaults=defaults)
            if created and author is not None:
                page.created_by = author
                page.save(update_fields=["created_by"])

            loaded += 1
            self.stdout.write(self.style.SUCCESS(f"Loaded page: {slug}"))

        self.stdout.write(self.style.SUCCESS(f"{loaded} page(s) loaded successfully"))

    def _author(self, email):
        User = get_user_model()
        if email:
            return User.objects.filter(email__iexact=email).first()
        return User.objects.filter(is_superuser=True).order_by("id").first()
