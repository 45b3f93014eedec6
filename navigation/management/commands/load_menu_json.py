import json
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from core.exceptions import CMSError
from navigation.models import MenuItem
from navigation.services import get_menu_service

MENU_FILE = Path("content_json/menu.json")


class Command(BaseCommand):
    help = "Create menu items from a JSON tree (content_json/menu.json by default)"

    def add_arguments(self, parser):
        parser.add_argument("--file", help="Path to the JSON file to load")
        parser.add_argument(
            "--replace",
            action="store_true",
            help="Delete every existing menu item first",
        )

    def handle(self, *args, **options):
        path = Path(options.get("file") or MENU_FILE)
        if not path.exists():
            raise CommandError(f"File not found: {path}")

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise CommandError(f"{path} is not valid JSON: {exc}") from exc

        items = data.get("items", []) if isinstance(data, dict) else data
        if not isinstance(items, list):
            raise CommandError("Expected a list of menu items (or {\"items\": [...]})")

        service = get_menu_service()
        if options.get("replace"):
            # Leaves first; PROTECT on parent forbids deleting a node with children.
            for node in reversed(list(MenuItem.objects.order_by("id"))):
                if MenuItem.objects.filter(pk=node.pk).exists():
                    service.delete(node.pk)

        created = 0
        stack = [(entry, None, i) for i, entry in reversed(list(enumerate(items)))]
        while stack:
            entry, parent_id, position = stack.pop()
            if not isinstance(entry, dict):
                self.stdout.write(
                    self.style.WARNING(f"Skipping item #{position}: not an object")
                )
                continue

            title = entry.get("title") or {}
            payload = {
                "title_en": entry.get("title_en", title.get("en")),
                "title_bn": entry.get("title_bn", title.get("bn")),
                "parent_id": parent_id,
                "is_external_link": entry.get("is_external_link", False),
                "url": entry.get("url"),
                "order": entry.get("order", position),
                "is_active": entry.get("is_active", True),
            }
            try:
                node = service.create(payload)
            except CMSError as exc:
                self.stdout.write(
                    self.style.WARNING(
                        f"Skipping {payload['title_en']!r}: {exc.detail}"
                    )
                )
                continue

            created += 1
            children = entry.get("children") or []
            for i, child in reversed(list(enumerate(children))):
                stack.append((child, node.id, i))

        self.stdout.write(self.style.SUCCESS(f"Loaded {created} menu item(s) from {path}"))
