"""Collections and categories — the browsing structure of the catalog."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Collection:
    id: str
    name: str
    image: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class Category:
    """A catalog category.  ``parent_id`` is None for top-level categories."""

    id: str
    name: str
    description: str | None = None
    image: str | None = None
    parent_id: str | None = None
    created_at: str = ""


@dataclass
class CategoryNode:
    category: Category
    children: list[CategoryNode] = field(default_factory=list)


def _leads_to(parents: dict[str, str], start: str, target: str) -> bool:
    current: str | None = start
    while current is not None:
        if current == target:
            return True
        current = parents.get(current)
    return False


def build_category_tree(categories: list[Category]) -> list[CategoryNode]:
    """Nest categories under their parents.

    Categories whose parent is unknown are promoted to roots, as is the
    category that would close a parent cycle.  Input order is preserved
    among siblings.
    """
    nodes = {c.id: CategoryNode(c) for c in categories}
    parents: dict[str, str] = {}
    roots: list[CategoryNode] = []
    for category in categories:
        node = nodes[category.id]
        parent_id = category.parent_id if category.parent_id in nodes else None
        if parent_id is None or _leads_to(parents, parent_id, category.id):
            roots.append(node)
        else:
            parents[category.id] = parent_id
            nodes[parent_id].children.append(node)
    return roots
