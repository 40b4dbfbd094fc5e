"""The three search actions: current scene, all enabled scenes, assets."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from . import config
from .config_manager import SearchSettings
from .content import ContentDatabase
from .graph import Node
from .inspector import ReferenceInspector
from .models import Finding
from .reporter import FindingCollector, Reporter
from .sources import asset_roots, iter_enabled_scenes, scene_roots
from .walker import GraphWalker

logger = logging.getLogger(__name__)


def find_missing_references(
    context: str,
    roots: Optional[Sequence[Node]],
    settings: Optional[SearchSettings] = None,
    reporter: Optional[Reporter] = None,
) -> List[Finding]:
    """Traverse ``roots`` once, reporting every finding as it is produced.

    Returns:
        The findings reported, in traversal order.
    """
    settings = settings or SearchSettings()
    inspector = ReferenceInspector(missing_marker=settings.missing_marker, max_depth=settings.max_depth)
    walker = GraphWalker(inspector, max_depth=settings.max_depth)
    collector = FindingCollector(reporter)

    for finding in walker.walk(context, roots):
        collector.report(finding)

    logger.info("%s (%d node(s) inspected)", collector.summary(context), walker.nodes_visited)
    return collector.findings


def find_in_current_scene(db: ContentDatabase, reporter: Optional[Reporter] = None) -> List[Finding]:
    """Search the active scene; the scene path is the context label."""
    scene = db.active_scene
    if scene is None:
        logger.warning("No active scene to search")
        return []
    return find_missing_references(scene.path, scene_roots(scene), db.settings, reporter)


def find_in_all_scenes(db: ContentDatabase, reporter: Optional[Reporter] = None) -> List[Finding]:
    """Open every enabled scene in turn and search each one on its own."""
    findings: List[Finding] = []
    for _scene in iter_enabled_scenes(db):
        findings.extend(find_in_current_scene(db, reporter))
    return findings


def find_in_assets(db: ContentDatabase, reporter: Optional[Reporter] = None) -> List[Finding]:
    """Search the top-level objects of every asset under the asset prefix."""
    return find_missing_references(config.PROJECT_CONTEXT, asset_roots(db), db.settings, reporter)
