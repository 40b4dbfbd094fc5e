"""Per-node classification of parts and object-reference properties."""

from __future__ import annotations

import logging
from typing import Callable, Iterator, List, Optional

from .errors import MarkerUnavailable
from .graph import MAX_PARENT_HOPS, Node
from .models import (
    Finding,
    FindingKind,
    PropertyEnumerable,
    PropertyKind,
    PropertyRecord,
    RawMarkerProbe,
)
from .naming import nicify_variable_name
from .paths import full_path, relative_path

logger = logging.getLogger(__name__)

MarkerReader = Callable[[PropertyRecord], Optional[str]]


class ReferenceInspector:
    """Find missing parts and dangling references on a single node."""

    def __init__(self, missing_marker: str = "Missing", max_depth: int = MAX_PARENT_HOPS) -> None:
        self.missing_marker = missing_marker
        self.max_depth = max_depth

    def inspect(self, context: str, node: Node, root: Optional[Node] = None) -> Iterator[Finding]:
        """Yield one finding per missing part and per dangling reference.

        Args:
            context: Label of the search (scene path or ``"Project"``).
            node: Node whose parts are inspected.
            root: Search root used for the relative path; defaults to ``node``.
        """
        root = node if root is None else root
        node_path = full_path(node)
        rel_path = relative_path(root, node, self.max_depth)

        for part in node.parts:
            type_name = getattr(part, "type_name", None) if part is not None else None
            if type_name is None:
                yield Finding(
                    kind=FindingKind.MISSING_PART,
                    context=context,
                    full_path=node_path,
                    relative_path=rel_path,
                    node=node,
                )
                continue

            for prop in self._missing_properties(part):
                yield Finding(
                    kind=FindingKind.MISSING_REFERENCE,
                    context=context,
                    full_path=node_path,
                    part_type=type_name,
                    property_name=nicify_variable_name(prop.name),
                    relative_path=rel_path,
                    node=node,
                )

    def _missing_properties(self, part: PropertyEnumerable) -> List[PropertyRecord]:
        # Collected before yielding so the cursor is closed once per part
        probe: Optional[MarkerReader] = part.probe_marker if isinstance(part, RawMarkerProbe) else None
        missing: List[PropertyRecord] = []
        with part.properties() as props:
            for prop in props:
                if prop.kind is not PropertyKind.OBJECT_REFERENCE:
                    continue
                if self.is_missing(part, prop, probe):
                    missing.append(prop)
        return missing

    def is_missing(
        self,
        part: PropertyEnumerable,
        prop: PropertyRecord,
        probe: Optional[MarkerReader] = None,
    ) -> bool:
        """True when ``prop`` has no target but evidence that it once had one."""
        if part.resolve_reference(prop) is not None:
            return False
        if prop.identifier != 0:
            return True
        marker = self._read_marker(probe, prop)
        return bool(marker) and marker.startswith(self.missing_marker)

    def _read_marker(self, probe: Optional[MarkerReader], prop: PropertyRecord) -> str:
        if probe is None:
            return ""
        try:
            marker = probe(prop)
        except (MarkerUnavailable, AttributeError) as exc:
            logger.debug("Marker unavailable for '%s', using identifier only: %s", prop.path or prop.name, exc)
            return ""
        return marker if isinstance(marker, str) else ""
