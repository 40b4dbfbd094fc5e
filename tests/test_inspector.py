"""Tests for per-node reference classification."""

from conftest import BrokenAccessorPart, MarkerPart, StubPart, ref

from missingrefs.graph import SceneGraph
from missingrefs.inspector import ReferenceInspector
from missingrefs.models import FindingKind, PropertyKind, PropertyRecord, RawMarkerProbe


def _node_with(*parts, name="Hero"):
    graph = SceneGraph()
    root = graph.add_node("World")
    node = graph.add_node(name, parent=root)
    for part in parts:
        graph.attach(node, part)
    return root, node


class TestReferenceInspector:
    """Test ReferenceInspector.inspect()."""

    def test_resolved_and_null_references_are_clean(self):
        """Resolved targets and never-assigned references yield nothing."""
        part = StubPart(props=[ref("target", 7), ref("unused", 0)], targets={7: object()})
        _, node = _node_with(part)

        assert list(ReferenceInspector().inspect("Ctx", node)) == []

    def test_dangling_identifier(self):
        """A nonzero identifier without a target is one finding."""
        part = StubPart(type_name="PlayerController", props=[ref("targetTransform", 12)])
        root, node = _node_with(part)

        findings = list(ReferenceInspector().inspect("Main", node, root=root))

        assert len(findings) == 1
        finding = findings[0]
        assert finding.kind is FindingKind.MISSING_REFERENCE
        assert finding.context == "Main"
        assert finding.full_path == "World/Hero"
        assert finding.part_type == "PlayerController"
        assert finding.property_name == "Target Transform"
        assert finding.relative_path == "World/Hero"
        assert finding.node == node

    def test_relative_path_defaults_to_node(self):
        part = StubPart(props=[ref("target", 3)])
        _, node = _node_with(part)

        finding = next(ReferenceInspector().inspect("Ctx", node))
        assert finding.relative_path == "Hero"

    def test_non_reference_kinds_are_ignored(self):
        """Only object-reference properties are classified."""
        props = [
            PropertyRecord("count", PropertyKind.INTEGER, "count", 5, 5),
            PropertyRecord("label", PropertyKind.STRING, "label", 0, "Missing"),
        ]
        _, node = _node_with(StubPart(props=props))

        assert list(ReferenceInspector().inspect("Ctx", node)) == []

    def test_missing_part(self):
        """An unresolvable part is reported once, without property detail."""
        broken = StubPart(type_name=None, props=[ref("target", 99)])
        _, node = _node_with(broken, None)

        findings = list(ReferenceInspector().inspect("Ctx", node))

        assert [f.kind for f in findings] == [FindingKind.MISSING_PART, FindingKind.MISSING_PART]
        assert all(f.part_type == "" and f.property_name == "" for f in findings)
        assert broken.opened == 0

    def test_missing_part_does_not_stop_other_parts(self):
        good = StubPart(type_name="Light", props=[ref("cookie", 4)])
        _, node = _node_with(StubPart(type_name=None), good)

        kinds = [f.kind for f in ReferenceInspector().inspect("Ctx", node)]
        assert kinds == [FindingKind.MISSING_PART, FindingKind.MISSING_REFERENCE]

    def test_marker_signals_missing(self):
        """A zero identifier with a 'Missing' marker is dangling."""
        part = MarkerPart(
            markers={"cookie": "Missing (Texture)", "flare": "None (Flare)"},
            props=[ref("cookie"), ref("flare")],
        )
        _, node = _node_with(part)

        findings = list(ReferenceInspector().inspect("Ctx", node))
        assert [f.property_name for f in findings] == ["Cookie"]

    def test_custom_marker_prefix(self):
        part = MarkerPart(markers={"cookie": "Gone: texture"}, props=[ref("cookie")])
        _, node = _node_with(part)

        assert len(list(ReferenceInspector(missing_marker="Gone").inspect("Ctx", node))) == 1
        assert list(ReferenceInspector().inspect("Ctx", node)) == []

    def test_marker_failure_falls_back_to_identifier(self):
        """A failing marker read only disables the marker check for that property."""
        part = MarkerPart(
            markers={"a": None, "b": "Missing (Mesh)"},
            props=[ref("a", 0), ref("a2", 8), ref("b", 0)],
        )
        part.markers["a2"] = None
        _, node = _node_with(part)

        findings = list(ReferenceInspector().inspect("Ctx", node))
        assert [f.property_name for f in findings] == ["A 2", "B"]

    def test_broken_marker_accessor_falls_back_to_identifier(self):
        """An accessor raising AttributeError leaves only the identifier check."""
        part = BrokenAccessorPart(props=[ref("cookie", 0), ref("flare", 6)])
        _, node = _node_with(part)

        findings = list(ReferenceInspector().inspect("Ctx", node))
        assert [f.property_name for f in findings] == ["Flare"]

    def test_part_without_marker_accessor_uses_identifier_only(self):
        """Parts lacking the marker capability are never asked for markers."""
        marked = PropertyRecord("cookie", PropertyKind.OBJECT_REFERENCE, "cookie", 0, {"marker": "Missing (Texture)"})
        part = StubPart(props=[marked, ref("flare", 6)])
        _, node = _node_with(part)

        assert not isinstance(part, RawMarkerProbe)
        assert isinstance(MarkerPart(markers={}), RawMarkerProbe)
        findings = list(ReferenceInspector().inspect("Ctx", node))
        assert [f.property_name for f in findings] == ["Flare"]

    def test_cursor_closed_per_part(self):
        """Each part's property cursor is released whether or not it had findings."""
        dirty = StubPart(props=[ref("x", 1)])
        clean = StubPart(props=[ref("y", 0)])
        _, node = _node_with(dirty, clean)

        list(ReferenceInspector().inspect("Ctx", node))

        assert (dirty.opened, dirty.closed) == (1, 1)
        assert (clean.opened, clean.closed) == (1, 1)

    def test_node_is_not_mutated(self):
        part = StubPart(props=[ref("x", 1)])
        _, node = _node_with(part)

        list(ReferenceInspector().inspect("Ctx", node))
        assert node.parts == [part]
        assert part.props == [ref("x", 1)]
