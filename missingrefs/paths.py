"""Path reconstruction for reporting node locations."""

from __future__ import annotations

from typing import List, Optional

from .graph import MAX_PARENT_HOPS, Node


def full_path(node: Node) -> str:
    """Return ``Root/Child/Leaf`` for ``node``, root-most name first."""
    names: List[str] = []
    current: Optional[Node] = node
    while current is not None:
        names.append(current.name)
        current = current.parent
    return "/".join(reversed(names))


def relative_path(root: Node, target: Node, max_depth: int = MAX_PARENT_HOPS) -> Optional[str]:
    """Path from ``root`` (inclusive) down to ``target``.

    Walks up from ``target`` for at most ``max_depth`` hops. Returns ``None``
    when ``root`` is not an ancestor of ``target`` (or is too far up to
    confirm); callers treat that as a soft failure.
    """
    names: List[str] = []
    current: Optional[Node] = target
    for _ in range(max_depth):
        if current is None:
            return None
        names.append(current.name)
        if current == root:
            return "/".join(reversed(names))
        current = current.parent
    return None
