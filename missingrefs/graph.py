"""Index-based scene graph: nodes live in a flat table, links are indices."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from .models import PropertyEnumerable

# Parent chains longer than this are treated as malformed
MAX_PARENT_HOPS = 100


@dataclass
class _NodeRecord:
    name: str
    parent: Optional[int]
    active: bool = True
    hidden: bool = False
    file_id: int = 0
    children: List[int] = field(default_factory=list)
    parts: List[Optional[PropertyEnumerable]] = field(default_factory=list)


class SceneGraph:
    """Arena holding every node of one scene or asset document.

    Nodes own nothing: children and parent are indices into ``_records``,
    and :class:`Node` is only a handle ``(graph, index)``.
    """

    def __init__(self) -> None:
        self._records: List[_NodeRecord] = []

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator["Node"]:
        for index in range(len(self._records)):
            yield Node(self, index)

    def add_node(
        self,
        name: str,
        parent: Optional["Node"] = None,
        active: bool = True,
        hidden: bool = False,
        file_id: int = 0,
    ) -> "Node":
        """Append a node, optionally as the last child of ``parent``."""
        parent_index = self._own_index(parent) if parent is not None else None
        index = len(self._records)
        self._records.append(
            _NodeRecord(name=name, parent=parent_index, active=active, hidden=hidden, file_id=file_id)
        )
        if parent_index is not None:
            self._records[parent_index].children.append(index)
        return Node(self, index)

    def set_parent(self, node: "Node", parent: Optional["Node"]) -> None:
        """Move ``node`` under ``parent`` (or make it a root).

        Raises:
            ValueError: if the move would create a cycle.
        """
        index = self._own_index(node)
        new_parent = self._own_index(parent) if parent is not None else None

        current = new_parent
        hops = 0
        while current is not None:
            if current == index or hops >= MAX_PARENT_HOPS:
                raise ValueError(f"Cannot parent '{node.name}' under '{parent.name}': cycle or too deep")
            current = self._records[current].parent
            hops += 1

        old_parent = self._records[index].parent
        if old_parent is not None:
            self._records[old_parent].children.remove(index)
        self._records[index].parent = new_parent
        if new_parent is not None:
            self._records[new_parent].children.append(index)

    def attach(self, node: "Node", part: Optional[PropertyEnumerable]) -> None:
        """Attach a part to ``node``. ``None`` stands for an unresolvable part."""
        self._records[self._own_index(node)].parts.append(part)

    def node(self, index: int) -> "Node":
        if not 0 <= index < len(self._records):
            raise IndexError(f"No node at index {index}")
        return Node(self, index)

    def roots(self) -> List["Node"]:
        return [Node(self, i) for i, rec in enumerate(self._records) if rec.parent is None]

    def _own_index(self, node: "Node") -> int:
        if node.graph is not self:
            raise ValueError(f"Node '{node.name}' belongs to a different graph")
        return node.index


class Node:
    """Read-only view of one node in a :class:`SceneGraph`."""

    __slots__ = ("graph", "index")

    def __init__(self, graph: SceneGraph, index: int) -> None:
        self.graph = graph
        self.index = index

    @property
    def _record(self) -> _NodeRecord:
        return self.graph._records[self.index]

    @property
    def name(self) -> str:
        return self._record.name

    @property
    def active(self) -> bool:
        return self._record.active

    @property
    def hidden(self) -> bool:
        return self._record.hidden

    @property
    def file_id(self) -> int:
        return self._record.file_id

    @property
    def parent(self) -> Optional["Node"]:
        parent = self._record.parent
        return Node(self.graph, parent) if parent is not None else None

    @property
    def children(self) -> List["Node"]:
        return [Node(self.graph, i) for i in self._record.children]

    @property
    def parts(self) -> List[Optional[PropertyEnumerable]]:
        return list(self._record.parts)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self.graph is other.graph and self.index == other.index

    def __hash__(self) -> int:
        return hash((id(self.graph), self.index))

    def __repr__(self) -> str:
        return f"Node({self.name!r}, index={self.index})"
