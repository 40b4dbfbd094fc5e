"""Core data models shared by the inspector, walker and reporter."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ContextManager, Dict, Iterator, Optional, Protocol, runtime_checkable


class PropertyKind(str, Enum):
    OBJECT_REFERENCE = "object_reference"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    STRING = "string"
    GENERIC = "generic"
    ARRAY = "array"


@dataclass(frozen=True)
class PropertyRecord:
    """One declared property of a part.

    ``identifier`` is the raw stored object identifier for reference
    properties; 0 means nothing was ever assigned.
    """

    name: str
    kind: PropertyKind
    path: str = ""
    identifier: int = 0
    value: Any = None


class FindingKind(str, Enum):
    MISSING_PART = "missing_part"
    MISSING_REFERENCE = "missing_reference"


@dataclass
class Finding:
    kind: FindingKind
    context: str
    full_path: str
    part_type: str = ""
    property_name: str = ""
    relative_path: Optional[str] = None
    node: Any = field(default=None, repr=False, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "context": self.context,
            "full_path": self.full_path,
            "part_type": self.part_type,
            "property_name": self.property_name,
            "relative_path": self.relative_path,
        }


# ------------------------------------------------------------------
# Part capabilities
# ------------------------------------------------------------------

@runtime_checkable
class PropertyEnumerable(Protocol):
    """Capability every part implementation must provide.

    ``properties()`` returns a scoped cursor: a context manager that yields
    an iterator of :class:`PropertyRecord` and is released on exit.
    """

    type_name: Optional[str]

    def properties(self) -> ContextManager[Iterator[PropertyRecord]]:
        ...

    def resolve_reference(self, prop: PropertyRecord) -> Optional[Any]:
        ...


@runtime_checkable
class RawMarkerProbe(Protocol):
    """Optional capability: read the raw textual marker of a reference.

    Returns ``None`` when the reference carries no marker, and raises
    :class:`~missingrefs.errors.MarkerUnavailable` when it cannot tell.
    """

    def probe_marker(self, prop: PropertyRecord) -> Optional[str]:
        ...
