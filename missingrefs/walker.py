"""Depth-first traversal of root node sets."""

from __future__ import annotations

import logging
from typing import Iterator, Optional, Sequence

from .graph import MAX_PARENT_HOPS, Node
from .inspector import ReferenceInspector
from .models import Finding

logger = logging.getLogger(__name__)


class GraphWalker:
    """Visit every node under each root, active or not, and inspect it."""

    def __init__(self, inspector: Optional[ReferenceInspector] = None, max_depth: int = MAX_PARENT_HOPS) -> None:
        self.inspector = inspector or ReferenceInspector(max_depth=max_depth)
        self.max_depth = max_depth
        self.nodes_visited = 0

    def walk(self, context: str, roots: Optional[Sequence[Node]]) -> Iterator[Finding]:
        """Lazily yield findings for ``roots`` and all their descendants.

        Pre-order: a node's parts are all inspected before its children,
        children in declared order. An empty or ``None`` root set yields
        nothing.
        """
        if not roots:
            return
        for root in roots:
            yield from self._visit(context, root, root, 0)

    def _visit(self, context: str, node: Node, root: Node, depth: int) -> Iterator[Finding]:
        self.nodes_visited += 1
        yield from self.inspector.inspect(context, node, root=root)

        if depth + 1 >= self.max_depth:
            if node.children:
                logger.warning(
                    "Depth limit %d reached at '%s'; %d child node(s) not inspected",
                    self.max_depth, node.name, len(node.children),
                )
            return
        for child in node.children:
            yield from self._visit(context, child, root, depth + 1)
