"""Scene and asset documents: JSON files loaded into a :class:`SceneGraph`.

Document layout::

    {
      "guid": "4f1c...",
      "objects": [
        {"fileID": 100, "name": "Root", "parent": 0, "active": true,
         "parts": [
           {"fileID": 101, "type": "Transform"},
           {"fileID": 102, "script": "9a0b...", "properties": {
               "target": {"fileID": 200},
               "icon": {"fileID": 7, "guid": "c3d2..."},
               "material": {"fileID": 0, "marker": "Missing (Material)"}
           }}
         ]}
      ]
    }

A mapping holding ``fileID`` is an object reference; ``null`` is an empty
reference. Parts name a built-in ``type`` or a ``script`` guid looked up in
the project's script registry.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Union

from .errors import DocumentLoadError, MarkerUnavailable
from .graph import Node, SceneGraph
from .models import PropertyKind, PropertyRecord

logger = logging.getLogger(__name__)

Target = Union[Node, "DocumentPart", "Document"]
ExternalResolver = Callable[[str, int], Optional[Target]]


def read_json(file_path: Path, rel_path: str) -> Dict[str, Any]:
    """Read a JSON document, raising :class:`DocumentLoadError` on failure."""
    try:
        payload = json.loads(file_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise DocumentLoadError(rel_path, str(exc)) from exc
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise DocumentLoadError(rel_path, f"invalid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise DocumentLoadError(rel_path, "top-level value must be an object")
    return payload


# ------------------------------------------------------------------
# Property enumeration
# ------------------------------------------------------------------

def _records(name: str, path: str, value: Any) -> Iterator[PropertyRecord]:
    if value is None:
        yield PropertyRecord(name, PropertyKind.OBJECT_REFERENCE, path, 0, None)
    elif isinstance(value, dict):
        if "fileID" in value:
            yield PropertyRecord(name, PropertyKind.OBJECT_REFERENCE, path, int(value["fileID"]), value)
            return
        yield PropertyRecord(name, PropertyKind.GENERIC, path, 0, value)
        for key, child in value.items():
            yield from _records(key, f"{path}.{key}", child)
    elif isinstance(value, list):
        yield PropertyRecord(name, PropertyKind.ARRAY, path, 0, value)
        for i, item in enumerate(value):
            yield from _records(f"{name}[{i}]", f"{path}[{i}]", item)
    elif isinstance(value, bool):
        yield PropertyRecord(name, PropertyKind.BOOLEAN, path, 0, value)
    elif isinstance(value, int):
        yield PropertyRecord(name, PropertyKind.INTEGER, path, 0, value)
    elif isinstance(value, float):
        yield PropertyRecord(name, PropertyKind.FLOAT, path, 0, value)
    else:
        yield PropertyRecord(name, PropertyKind.STRING, path, 0, str(value))


def _check_references(value: Any, path: str, rel_path: str) -> None:
    if isinstance(value, dict):
        if "fileID" in value:
            file_id = value["fileID"]
            if isinstance(file_id, bool) or not isinstance(file_id, int):
                raise DocumentLoadError(rel_path, f"property '{path}' has non-integer fileID {file_id!r}")
            return
        for key, child in value.items():
            _check_references(child, f"{path}.{key}", rel_path)
    elif isinstance(value, list):
        for i, item in enumerate(value):
            _check_references(item, f"{path}[{i}]", rel_path)


class PropertyCursor:
    """Scoped, single-pass view over a part's properties.

    Used as a context manager; iteration after :meth:`close` fails.
    """

    def __init__(self, raw: Mapping[str, Any]) -> None:
        self._raw = raw
        self.closed = False

    def __enter__(self) -> Iterator[PropertyRecord]:
        return self._iterate()

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self.closed = True

    def _iterate(self) -> Iterator[PropertyRecord]:
        for name, value in self._raw.items():
            for record in _records(name, name, value):
                if self.closed:
                    raise ValueError("Property cursor is closed")
                yield record


class DocumentPart:
    """A part loaded from a document; resolves references through it."""

    def __init__(
        self,
        document: "Document",
        file_id: int,
        type_name: Optional[str],
        raw_properties: Mapping[str, Any],
    ) -> None:
        self.document = document
        self.file_id = file_id
        self.type_name = type_name
        self._raw = raw_properties

    def properties(self) -> PropertyCursor:
        return PropertyCursor(self._raw)

    def resolve_reference(self, prop: PropertyRecord) -> Optional[Target]:
        if prop.kind is not PropertyKind.OBJECT_REFERENCE or prop.identifier == 0:
            return None
        guid = prop.value.get("guid") if isinstance(prop.value, dict) else None
        return self.document.resolve(prop.identifier, guid)

    def probe_marker(self, prop: PropertyRecord) -> Optional[str]:
        if prop.value is None:
            return None
        if not isinstance(prop.value, dict):
            raise MarkerUnavailable(f"'{prop.path}' is not a reference value")
        marker = prop.value.get("marker")
        return marker if isinstance(marker, str) else None

    def __repr__(self) -> str:
        return f"DocumentPart({self.type_name!r}, fileID={self.file_id})"


# ------------------------------------------------------------------
# Documents
# ------------------------------------------------------------------

class Document:
    """One loaded scene or asset: its graph plus a fileID lookup table."""

    def __init__(self, path: str, guid: Optional[str], external: Optional[ExternalResolver] = None) -> None:
        self.path = path
        self.guid = guid
        self.graph = SceneGraph()
        self.external = external
        self._targets: Dict[int, Target] = {}

    @property
    def has_objects(self) -> bool:
        return len(self.graph) > 0

    def target(self, file_id: int) -> Optional[Target]:
        return self._targets.get(file_id)

    def resolve(self, file_id: int, guid: Optional[str] = None) -> Optional[Target]:
        """Resolve a reference stored in this document."""
        if file_id == 0:
            return None
        if guid and guid != self.guid:
            return self.external(guid, file_id) if self.external else None
        return self._targets.get(file_id)

    def roots(self) -> List[Node]:
        return self.graph.roots()

    def _register(self, file_id: int, target: Target) -> None:
        if file_id in self._targets:
            raise DocumentLoadError(self.path, f"duplicate fileID {file_id}")
        self._targets[file_id] = target


def _int_field(raw: Mapping[str, Any], key: str, rel_path: str, default: int = 0) -> int:
    value = raw.get(key, default)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int):
        raise DocumentLoadError(rel_path, f"'{key}' must be an integer, got {value!r}")
    return value


def _part_type(raw: Mapping[str, Any], scripts: Mapping[str, str]) -> Optional[str]:
    if "script" in raw:
        guid = raw["script"]
        return scripts.get(guid) if isinstance(guid, str) else None
    type_name = raw.get("type")
    return type_name if isinstance(type_name, str) and type_name else None


def load_document(
    payload: Mapping[str, Any],
    rel_path: str,
    scripts: Optional[Mapping[str, str]] = None,
    external: Optional[ExternalResolver] = None,
) -> Document:
    """Build a :class:`Document` from a decoded JSON payload.

    Args:
        payload: Decoded document.
        rel_path: Project-relative path, used as label and in errors.
        scripts: Script registry mapping script guid to type name.
        external: Resolver for references into other documents.

    Raises:
        DocumentLoadError: if the payload is malformed.
    """
    scripts = scripts or {}
    guid = payload.get("guid")
    document = Document(rel_path, guid if isinstance(guid, str) else None, external)

    objects = payload.get("objects", [])
    if not isinstance(objects, list):
        raise DocumentLoadError(rel_path, "'objects' must be a list")

    by_id: Dict[int, Node] = {}
    parents: List[tuple] = []
    for raw in objects:
        if not isinstance(raw, dict):
            raise DocumentLoadError(rel_path, f"object entry must be a mapping, got {raw!r}")
        file_id = _int_field(raw, "fileID", rel_path)
        if file_id == 0:
            raise DocumentLoadError(rel_path, f"object '{raw.get('name', '?')}' has no fileID")
        node = document.graph.add_node(
            str(raw.get("name", "")),
            active=bool(raw.get("active", True)),
            hidden=bool(raw.get("hidden", False)),
            file_id=file_id,
        )
        document._register(file_id, node)
        by_id[file_id] = node
        parents.append((node, _int_field(raw, "parent", rel_path)))

        raw_parts = raw.get("parts", [])
        if not isinstance(raw_parts, list):
            raise DocumentLoadError(rel_path, f"'parts' of '{node.name}' must be a list")
        for raw_part in raw_parts:
            document.graph.attach(node, _load_part(document, raw_part, scripts, rel_path))

    for node, parent_id in parents:
        if parent_id == 0:
            continue
        parent = by_id.get(parent_id)
        if parent is None:
            logger.warning("%s: parent %d of '%s' not found; treating it as a root", rel_path, parent_id, node.name)
            continue
        try:
            document.graph.set_parent(node, parent)
        except ValueError as exc:
            raise DocumentLoadError(rel_path, str(exc)) from exc

    return document


def _load_part(
    document: Document,
    raw: Any,
    scripts: Mapping[str, str],
    rel_path: str,
) -> Optional[DocumentPart]:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise DocumentLoadError(rel_path, f"part entry must be a mapping, got {raw!r}")
    properties = raw.get("properties", {}) or {}
    if not isinstance(properties, dict):
        raise DocumentLoadError(rel_path, "'properties' must be a mapping")
    for key, value in properties.items():
        _check_references(value, key, rel_path)

    file_id = _int_field(raw, "fileID", rel_path)
    part = DocumentPart(document, file_id, _part_type(raw, scripts), properties)
    if file_id:
        document._register(file_id, part)
    return part


def read_document(
    file_path: Path,
    rel_path: str,
    scripts: Optional[Mapping[str, str]] = None,
    external: Optional[ExternalResolver] = None,
) -> Document:
    """Read and load the document at ``file_path``."""
    return load_document(read_json(file_path, rel_path), rel_path, scripts, external)
