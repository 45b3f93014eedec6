# backend/navigation/rendering.py
from collections import defaultdict

from .slugs import normalize_slug


def _annotate(node, published: set) -> dict:
    slug = normalize_slug(node.slug)
    url = node.url or ""
    return {
        "id": node.id,
        "title": {"en": node.title_en, "bn": node.title_bn},
        "slug": node.slug,
        "url": node.url,
        "order": node.order,
        "isExternalLink": node.is_external_link,
        "isExternal": url.startswith("http"),
        # "/" rather than a link to a page that would 404
        "href": f"/pages/{slug}" if slug and slug in published else "/",
        "children": [],
    }


def render_public_tree(menu_repository, page_repository) -> list[dict]:
    """
    Active menu items as a forest ordered by `order` at every level.

    Active nodes are loaded once and grouped by parent id; the tree is then
    walked with an explicit stack, so nesting depth is not limited by
    Python's recursion limit. Children of inactive nodes are not shown.
    """
    published = page_repository.published_slugs()

    by_parent = defaultdict(list)
    for node in menu_repository.all(active_only=True):
        by_parent[node.parent_id].append(node)

    forest: list[dict] = []
    stack = [(node, forest) for node in reversed(by_parent[None])]
    while stack:
        node, siblings = stack.pop()
        entry = _annotate(node, published)
        siblings.append(entry)
        for child in reversed(by_parent.get(node.id, [])):
            stack.append((child, entry["children"]))
    return forest
