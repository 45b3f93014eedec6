# backend/navigation/services.py
"""Service layer for menu tree mutations (create, update, delete, reorder)."""

import logging

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError

from core.exceptions import (
    CascadeInconsistencyError,
    CycleError,
    DuplicateError,
    NotFoundError,
    ValidationError,
)

from .models import ORDER_MAX, TITLE_MAX_LENGTH, url_validator
from .repositories import TITLE_FIELDS, DjangoMenuRepository, MenuRepository
from .slugs import compose_slug, replace_prefix

logger = logging.getLogger(__name__)

MUTABLE_FIELDS = frozenset(
    ("title_en", "title_bn", "parent_id", "is_external_link", "url", "order", "is_active")
)


def clean_title(field_name: str, value) -> str:
    if value is not None and not isinstance(value, str):
        raise ValidationError("Title must be a string.", field=field_name)
    title = (value or "").strip()
    if not title:
        raise ValidationError("Title is required.", field=field_name)
    if len(title) > TITLE_MAX_LENGTH:
        raise ValidationError(
            f"Title may not be longer than {TITLE_MAX_LENGTH} characters.",
            field=field_name,
        )
    return title


def clean_url(value) -> str | None:
    url = (value or "").strip()
    if not url:
        return None
    try:
        url_validator(url)
    except DjangoValidationError as exc:
        raise ValidationError("Invalid URL format", field="url") from exc
    return url


def clean_order(value) -> int:
    if isinstance(value, bool):
        raise ValidationError("Order must be an integer.", field="order")
    try:
        order = int(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError("Order must be an integer.", field="order") from exc
    if not 0 <= order <= ORDER_MAX:
        raise ValidationError(f"Order must be between 0 and {ORDER_MAX}.", field="order")
    return order


class MenuTreeService:
    """
    Keeps the menu tree consistent:

    - slugs are unique and derived from title_en plus the parent's slug,
    - no node is its own ancestor,
    - deleting a node relinks its children to the grandparent and rewrites
      the slug prefix of everything below it.

    All checks run before the first write. Multi-row writes happen inside
    repository.atomic().
    """

    def __init__(
        self,
        repository: MenuRepository,
        *,
        unique_titles: bool = True,
        on_inconsistency=None,
    ):
        self.repository = repository
        self.unique_titles = unique_titles
        # Called with the relink arguments when a non-transactional store is
        # left half-relinked, e.g. to queue navigation.tasks.repair_menu_delete.
        self.on_inconsistency = on_inconsistency
        # Saves issued by the current cascade.
        self.writes = 0

    # ------------------------------------------------------------------
    # lookups / validation
    # ------------------------------------------------------------------
    def get(self, node_id):
        node = self.repository.get(node_id)
        if node is None:
            raise NotFoundError("Menu item not found!")
        return node

    def ensure_acyclic(self, node_id, parent_id):
        """
        Walk from the proposed parent up to its root. Fails when the parent is
        missing or when node_id shows up on the way (node_id is None for new
        nodes, which cannot be anyone's ancestor yet).

        Returns the parent node, or None for a root.
        """
        if parent_id is None:
            return None

        parent = self.repository.get(parent_id)
        if parent is None:
            raise ValidationError("Parent menu item does not exist.", field="parent_id")

        seen = set()
        current = parent
        while current is not None:
            if node_id is not None and current.id == node_id:
                raise CycleError(field="parent_id")
            if current.id in seen:
                # The stored chain already loops; refuse to attach anything to it.
                raise CycleError(field="parent_id")
            seen.add(current.id)
            if current.parent_id is None:
                break
            current = self.repository.get(current.parent_id)
        return parent

    def _check_titles(self, titles: dict, exclude_id=None):
        if not self.unique_titles:
            return
        for field_name in TITLE_FIELDS:
            value = titles.get(field_name)
            if value and self.repository.title_taken(field_name, value, exclude_id):
                raise DuplicateError(
                    "Menu item with this title already exists", field=field_name
                )

    def _check_slugs(self, planned: dict, exclude_ids):
        """planned maps node id (None for a new node) to its future slug."""
        seen = set()
        for slug in planned.values():
            if not slug:
                continue
            if slug in seen or self.repository.slug_taken(slug, exclude_ids):
                raise DuplicateError(field="slug")
            seen.add(slug)

    def _derive_slug(self, title_en, parent, external: bool):
        if external:
            return None
        return compose_slug(title_en, parent.slug if parent is not None else None)

    # ------------------------------------------------------------------
    # mutations
    # ------------------------------------------------------------------
    def create(self, data: dict):
        titles = {name: clean_title(name, data.get(name)) for name in TITLE_FIELDS}
        url = clean_url(data.get("url"))
        is_external_link = bool(data.get("is_external_link", False))
        order = clean_order(data.get("order", 0))
        is_active = bool(data.get("is_active", True))

        parent = self.ensure_acyclic(None, data.get("parent_id"))
        if is_active:
            self._check_titles(titles)

        slug = self._derive_slug(titles["title_en"], parent, is_external_link or url)
        self._check_slugs({None: slug}, exclude_ids=())

        node = self.repository.new(
            title_en=titles["title_en"],
            title_bn=titles["title_bn"],
            slug=slug,
            parent_id=parent.id if parent is not None else None,
            is_external_link=is_external_link,
            url=url,
            order=order,
            is_active=is_active,
        )
        with self.repository.atomic():
            self.repository.save(node)

        logger.info("Created menu item %s (%s)", node.id, node.slug or node.url)
        return node

    def update(self, node_id, patch: dict):
        unknown = set(patch) - MUTABLE_FIELDS
        if unknown:
            raise ValidationError(
                f"Cannot update field(s): {', '.join(sorted(unknown))}.",
                field=sorted(unknown)[0],
            )

        node = self.get(node_id)

        titles = {
            name: clean_title(name, patch[name]) if name in patch else getattr(node, name)
            for name in TITLE_FIELDS
        }
        url = clean_url(patch["url"]) if "url" in patch else node.url
        is_external_link = (
            bool(patch["is_external_link"])
            if "is_external_link" in patch
            else node.is_external_link
        )
        order = clean_order(patch["order"]) if "order" in patch else node.order
        is_active = bool(patch["is_active"]) if "is_active" in patch else node.is_active

        parent_changed = "parent_id" in patch and patch["parent_id"] != node.parent_id
        if parent_changed:
            parent = self.ensure_acyclic(node.id, patch["parent_id"])
        else:
            parent = self.repository.get(node.parent_id) if node.parent_id else None

        titles_changed = any(titles[name] != getattr(node, name) for name in TITLE_FIELDS)
        if is_active and (titles_changed or not node.is_active):
            self._check_titles(titles, exclude_id=node.id)

        external = bool(is_external_link or url)
        reslug = (
            parent_changed
            or titles["title_en"] != node.title_en
            or external != node.routes_externally
        )

        planned = {}
        subtree = []
        if reslug:
            planned[node.id] = self._derive_slug(titles["title_en"], parent, external)
            subtree = self.repository.descendants(node.id)
            planned.update(self._plan_subtree(node.id, planned[node.id], subtree))
            self._check_slugs(planned, exclude_ids=[node.id, *planned])

        node.title_en = titles["title_en"]
        node.title_bn = titles["title_bn"]
        node.url = url
        node.is_external_link = is_external_link
        node.order = order
        node.is_active = is_active
        if parent_changed:
            node.parent_id = parent.id if parent is not None else None
        changes = []
        if reslug:
            changes = [(node, planned[node.id])] + [
                (child, planned[child.id])
                for child in subtree
                if child.slug != planned[child.id]
            ]

        with self.repository.atomic():
            if changes:
                self._write_slugs(changes)
            else:
                self.repository.save(node)
        rewritten = max(len(changes) - 1, 0)

        logger.info(
            "Updated menu item %s (%s), %d descendant slug(s) rewritten",
            node.id,
            node.slug or node.url,
            rewritten,
        )
        return node

    def _plan_subtree(self, root_id, root_slug, subtree) -> dict:
        """Recompute descendant slugs below root_id; parents come before children."""
        slugs = {root_id: root_slug}
        for child in subtree:
            if child.routes_externally:
                slugs[child.id] = None
                continue
            parent_slug = slugs.get(child.parent_id)
            slugs[child.id] = compose_slug(child.title_en, parent_slug)
        slugs.pop(root_id)
        return slugs

    def set_active(self, node_id, is_active: bool):
        return self.update(node_id, {"is_active": is_active})

    def reorder(self, ids_in_order):
        """Assign order = position for every id; all-or-nothing."""
        ids = list(ids_in_order or [])
        if not ids:
            raise ValidationError("A non-empty list of menu item ids is required.", field="ids")
        if len(set(ids)) != len(ids):
            raise ValidationError("Menu item ids must be unique.", field="ids")
        if len(ids) > ORDER_MAX + 1:
            raise ValidationError("Too many menu items to reorder.", field="ids")

        nodes = []
        for node_id in ids:
            node = self.repository.get(node_id)
            if node is None:
                raise NotFoundError(f"Menu item {node_id} not found!")
            nodes.append(node)

        with self.repository.atomic():
            for index, node in enumerate(nodes):
                if node.order != index:
                    node.order = index
                    self.repository.save(node)

        logger.info("Reordered %d menu item(s)", len(nodes))
        return nodes

    # ------------------------------------------------------------------
    # delete + cascade
    # ------------------------------------------------------------------
    def delete(self, node_id):
        """
        Delete a node. Its children move up to its parent (or become roots)
        and the deleted slug prefix is swapped for the new parent's slug in
        every slug below it.
        """
        node = self.get(node_id)
        grandparent = self.repository.get(node.parent_id) if node.parent_id else None

        new_parent_id = grandparent.id if grandparent is not None else None
        old_prefix = node.slug or ""
        new_prefix = (grandparent.slug or "") if grandparent is not None else ""

        planned = {
            other.id: replace_prefix(other.slug, old_prefix, new_prefix)
            for other in self._prefixed(old_prefix)
        }
        self._check_slugs(planned, exclude_ids=[node.id, *planned])

        children = self.repository.children(node.id)
        self.writes = 0
        try:
            with self.repository.atomic():
                self.relink_children(node.id, new_parent_id, old_prefix, new_prefix)
                self.repository.delete(self.get(node.id))
        except Exception as exc:
            # Nothing to repair when the store rolled back or was never touched.
            if self.repository.transactional or self.writes == 0:
                raise
            logger.error(
                "Menu delete left children partly relinked",
                extra={
                    "menu_id": node.id,
                    "child_ids": [child.id for child in children],
                    "new_parent_id": new_parent_id,
                    "old_prefix": old_prefix,
                    "new_prefix": new_prefix,
                },
            )
            if self.on_inconsistency is not None:
                self.on_inconsistency(
                    node_id=node.id,
                    new_parent_id=new_parent_id,
                    old_prefix=old_prefix,
                    new_prefix=new_prefix,
                )
            raise CascadeInconsistencyError() from exc

        logger.info(
            "Deleted menu item %s (%s); relinked %d child(ren) to %s",
            node.id,
            node.slug or node.url,
            len(children),
            new_parent_id if new_parent_id is not None else "root",
        )
        return children

    def _prefixed(self, prefix: str) -> list:
        if not prefix:
            return []
        return [
            other
            for other in self.repository.all()
            if other.slug and other.slug.startswith(prefix.rstrip("/") + "/")
        ]

    def relink_children(self, node_id, new_parent_id, old_prefix: str, new_prefix: str) -> int:
        """
        Move the children of node_id under new_parent_id and rewrite every
        slug below old_prefix to start with new_prefix instead.

        The node being deleted gives up its slug first, since a child may be
        about to take it ("/about/about" -> "/about").

        Idempotent: on a tree that is already relinked it writes nothing.
        Returns the number of nodes relinked.
        """
        node = self.repository.get(node_id)
        if node is not None and node.slug:
            node.slug = None
            self._save(node)

        changes = {}
        for child in self.repository.children(node_id):
            slug = replace_prefix(child.slug, old_prefix, new_prefix)
            if child.parent_id == new_parent_id and child.slug == slug:
                continue
            child.parent_id = new_parent_id
            changes[child.id] = (child, slug)

        for other in self._prefixed(old_prefix):
            if other.id not in changes:
                changes[other.id] = (other, replace_prefix(other.slug, old_prefix, new_prefix))

        self._write_slugs(changes.values())
        return len(changes)

    def _save(self, node):
        self.repository.save(node)
        self.writes += 1

    def _write_slugs(self, changes):
        """
        Save (node, new_slug) pairs so that no node takes a slug another
        pending node still holds. Slugs that only swap among themselves are
        parked on NULL first.
        """
        pending = {node.id: (node, slug) for node, slug in changes}
        holders = {node.slug: node.id for node, _ in pending.values() if node.slug}

        while pending:
            ready = [
                node_id
                for node_id, (node, slug) in pending.items()
                if holders.get(slug, node_id) == node_id or holders[slug] not in pending
            ]
            if not ready:
                node_id = next(iter(pending))
                node, _ = pending[node_id]
                holders.pop(node.slug, None)
                node.slug = None
                self._save(node)
                continue

            for node_id in ready:
                node, slug = pending.pop(node_id)
                if holders.get(node.slug) == node_id:
                    del holders[node.slug]
                node.slug = slug
                self._save(node)

    def repair_delete(self, node_id, new_parent_id, old_prefix: str, new_prefix: str) -> int:
        """Finish a delete that stopped half way. Safe to run any number of times."""
        with self.repository.atomic():
            written = self.relink_children(node_id, new_parent_id, old_prefix, new_prefix)
            node = self.repository.get(node_id)
            if node is not None:
                self.repository.delete(node)
        if written or node is not None:
            logger.warning(
                "Repaired menu delete %s: %d node(s) relinked", node_id, written
            )
        return written


def schedule_cascade_repair(**kwargs):
    from .tasks import repair_menu_delete

    repair_menu_delete.delay(**kwargs)


def get_menu_service() -> MenuTreeService:
    return MenuTreeService(
        DjangoMenuRepository(),
        unique_titles=getattr(settings, "CMS_UNIQUE_MENU_TITLES", True),
        on_inconsistency=schedule_cascade_repair,
    )
