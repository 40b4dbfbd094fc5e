"""Root node sets for the three search actions."""

from __future__ import annotations

import logging
from typing import Iterator, List

from .content import ContentDatabase
from .documents import Document
from .errors import DocumentLoadError
from .graph import Node

logger = logging.getLogger(__name__)


def scene_roots(scene: Document) -> List[Node]:
    """Root nodes of ``scene``, inactive ones included, hidden ones excluded."""
    return [node for node in scene.roots() if not node.hidden]


def iter_enabled_scenes(db: ContentDatabase) -> Iterator[Document]:
    """Open each enabled build scene in turn, yielding it while it is active.

    A scene that fails to load is logged and skipped.
    """
    for entry in db.enabled_scenes():
        try:
            scene = db.open_scene(entry.path)
        except DocumentLoadError as exc:
            logger.error("%s; skipping scene", exc)
            continue
        yield scene


def asset_roots(db: ContentDatabase) -> List[Node]:
    """Top-level objects of every loadable document under the asset prefix."""
    roots: List[Node] = []
    for rel_path in db.asset_paths():
        document = db.load_asset(rel_path)
        if document is not None:
            roots.extend(document.roots())
    return roots
