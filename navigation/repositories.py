# backend/navigation/repositories.py
"""
Storage for the menu tree.

MenuTreeService only talks to a MenuRepository, so the tree rules (slugs,
cycles, cascades) don't depend on ORM joins or any other store-specific
query. Two stores are provided:

    DjangoMenuRepository    the navigation.MenuItem table
    InMemoryMenuRepository  an adjacency map keyed by id
"""
import copy
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterable, Iterator

from django.db import IntegrityError, connections, transaction
from django.utils import timezone

from core.exceptions import DuplicateError

from .models import MenuItem

TITLE_FIELDS = ("title_en", "title_bn")


class MenuRepository(ABC):
    # Whether atomic() rolls back every write on error. Stores without
    # transactions get their cascades repaired by an idempotent retry.
    transactional = True

    @abstractmethod
    def get(self, node_id):
        """Return the node or None."""

    @abstractmethod
    def children(self, parent_id) -> list:
        """Direct children of parent_id, sorted by (order, id)."""

    @abstractmethod
    def all(self, active_only: bool = False) -> list:
        """Every node sorted by (order, id)."""

    @abstractmethod
    def slug_taken(self, slug: str, exclude_ids: Iterable = ()) -> bool:
        ...

    @abstractmethod
    def title_taken(self, field_name: str, value: str, exclude_id=None) -> bool:
        """True when an *active* node other than exclude_id uses this title."""

    @abstractmethod
    def new(self, **fields):
        """Build an unsaved node."""

    @abstractmethod
    def save(self, node):
        ...

    @abstractmethod
    def delete(self, node):
        ...

    @abstractmethod
    def atomic(self):
        """Context manager grouping several writes."""

    def roots(self, active_only: bool = False) -> list:
        return [node for node in self.all(active_only) if node.parent_id is None]

    def descendants(self, node_id) -> list:
        """All nodes below node_id, parents before children."""
        found = []
        stack = [node_id]
        while stack:
            for child in self.children(stack.pop()):
                found.append(child)
                stack.append(child.id)
        return found


class DjangoMenuRepository(MenuRepository):
    def __init__(self, using: str = "default"):
        self.using = using

    @property
    def transactional(self):
        return connections[self.using].features.supports_transactions

    def _qs(self):
        return MenuItem.objects.using(self.using)

    def get(self, node_id):
        return self._qs().filter(pk=node_id).first()

    def children(self, parent_id) -> list:
        return list(self._qs().filter(parent_id=parent_id).order_by("order", "id"))

    def all(self, active_only: bool = False) -> list:
        qs = self._qs().order_by("order", "id")
        if active_only:
            qs = qs.filter(is_active=True)
        return list(qs)

    def slug_taken(self, slug: str, exclude_ids: Iterable = ()) -> bool:
        return self._qs().filter(slug=slug).exclude(pk__in=list(exclude_ids)).exists()

    def title_taken(self, field_name: str, value: str, exclude_id=None) -> bool:
        qs = self._qs().filter(is_active=True, **{f"{field_name}__iexact": value})
        if exclude_id is not None:
            qs = qs.exclude(pk=exclude_id)
        return qs.exists()

    def new(self, **fields):
        return MenuItem(**fields)

    def save(self, node):
        # The unique index on slug is the last line of defence when two
        # requests race past slug_taken().
        try:
            with transaction.atomic(using=self.using):
                node.save(using=self.using)
        except IntegrityError as exc:
            raise DuplicateError(field="slug") from exc
        return node

    def delete(self, node):
        node.delete(using=self.using)

    def atomic(self):
        return transaction.atomic(using=self.using)


@dataclass
class MenuNode:
    """Plain menu node used by InMemoryMenuRepository."""

    title_en: str
    title_bn: str
    slug: str | None = None
    parent_id: int | None = None
    is_external_link: bool = False
    url: str | None = None
    order: int = 0
    is_active: bool = True
    id: int | None = None
    created_at: object = None
    updated_at: object = None

    @property
    def routes_externally(self) -> bool:
        return bool(self.is_external_link or self.url)


class InMemoryMenuRepository(MenuRepository):
    """
    Adjacency map keyed by id. atomic() snapshots the map and restores it on
    error unless the repository was built with transactional=False, which
    mimics a store without transactions.
    """

    def __init__(self, nodes: Iterable[MenuNode] = (), transactional: bool = True):
        self._nodes: dict[int, MenuNode] = {}
        self.transactional = transactional
        for node in nodes:
            self.save(node)

    def _sorted(self, nodes) -> list:
        return sorted(nodes, key=lambda n: (n.order, n.id))

    def get(self, node_id):
        node = self._nodes.get(node_id)
        return copy.copy(node) if node else None

    def children(self, parent_id) -> list:
        return self._sorted(
            copy.copy(n) for n in self._nodes.values() if n.parent_id == parent_id
        )

    def all(self, active_only: bool = False) -> list:
        return self._sorted(
            copy.copy(n)
            for n in self._nodes.values()
            if n.is_active or not active_only
        )

    def slug_taken(self, slug: str, exclude_ids: Iterable = ()) -> bool:
        excluded = set(exclude_ids)
        return any(
            n.slug == slug and n.id not in excluded for n in self._nodes.values()
        )

    def title_taken(self, field_name: str, value: str, exclude_id=None) -> bool:
        wanted = value.casefold()
        return any(
            n.is_active
            and n.id != exclude_id
            and getattr(n, field_name).casefold() == wanted
            for n in self._nodes.values()
        )

    def new(self, **fields):
        return MenuNode(**fields)

    def save(self, node):
        # Mirrors the unique index on navigation_menuitem.slug.
        if node.slug and any(
            n.slug == node.slug and n.id != node.id for n in self._nodes.values()
        ):
            raise DuplicateError(field="slug")
        now = timezone.now()
        if node.id is None:
            node.id = max(self._nodes, default=0) + 1
            node.created_at = now
        node.updated_at = now
        self._nodes[node.id] = copy.copy(node)
        return node

    def delete(self, node):
        if any(n.parent_id == node.id for n in self._nodes.values()):
            raise RuntimeError(f"Menu node {node.id} still has children")
        self._nodes.pop(node.id, None)

    @contextmanager
    def atomic(self) -> Iterator[None]:
        snapshot = copy.deepcopy(self._nodes)
        try:
            yield
        except Exception:
            if self.transactional:
                self._nodes = snapshot
            raise
