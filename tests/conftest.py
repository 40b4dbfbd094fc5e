"""Pytest configuration and fixtures for missingrefs tests."""

import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Generator, List, Optional

import pytest

from missingrefs.content import ContentDatabase
from missingrefs.errors import MarkerUnavailable
from missingrefs.graph import SceneGraph
from missingrefs.models import PropertyKind, PropertyRecord


class StubPart:
    """In-memory part with controllable targets; counts cursor usage."""

    def __init__(
        self,
        type_name: Optional[str] = "Behaviour",
        props: Optional[List[PropertyRecord]] = None,
        targets: Optional[Dict[int, object]] = None,
    ):
        self.type_name = type_name
        self.props = props or []
        self.targets = targets or {}
        self.opened = 0
        self.closed = 0

    @contextmanager
    def properties(self):
        self.opened += 1
        try:
            yield iter(self.props)
        finally:
            self.closed += 1

    def resolve_reference(self, prop):
        if prop.identifier == 0:
            return None
        return self.targets.get(prop.identifier)


class MarkerPart(StubPart):
    """Stub part that also exposes raw markers; ``None`` in ``markers`` raises."""

    def __init__(self, markers: Dict[str, Optional[str]], **kwargs):
        super().__init__(**kwargs)
        self.markers = markers

    def probe_marker(self, prop):
        if prop.name in self.markers and self.markers[prop.name] is None:
            raise MarkerUnavailable(f"no marker accessor for {prop.name}")
        return self.markers.get(prop.name)


class BrokenAccessorPart(StubPart):
    """Stub part whose marker accessor itself is broken."""

    def probe_marker(self, prop):
        raise AttributeError("objectReferenceStringValue")


def ref(name: str, identifier: int = 0) -> PropertyRecord:
    return PropertyRecord(name, PropertyKind.OBJECT_REFERENCE, name, identifier)


@pytest.fixture(autouse=True)
def _isolated_home(tmp_path: Path, monkeypatch):
    """Keep config and state files out of the real home directory."""
    home = tmp_path / "home"
    monkeypatch.setattr("missingrefs.config.BASE_DIR", home)
    monkeypatch.setattr("missingrefs.config.CONFIG_FILE", home / "config.toml")
    monkeypatch.setattr("missingrefs.config.STATE_FILE", home / "state.json")
    monkeypatch.delenv("MISSINGREFS_PROJECT", raising=False)
    return home


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def sample_project_path() -> Path:
    """Get path to the sample content project."""
    return Path(__file__).parent / "fixtures" / "sample_project"


@pytest.fixture
def sample_db(sample_project_path: Path) -> ContentDatabase:
    return ContentDatabase(sample_project_path)


@pytest.fixture
def chain_graph():
    """``Root -> Child -> Leaf`` plus an unrelated root."""
    graph = SceneGraph()
    root = graph.add_node("Root")
    child = graph.add_node("Child", parent=root)
    leaf = graph.add_node("Leaf", parent=child)
    unrelated = graph.add_node("Unrelated")
    return graph, root, child, leaf, unrelated
