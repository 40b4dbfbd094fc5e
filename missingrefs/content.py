"""Project content database: asset listing, guid index, scenes and state."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from . import config
from .config_manager import SearchSettings
from .documents import Document, Target, read_document, read_json
from .errors import DocumentLoadError, ProjectError

logger = logging.getLogger(__name__)


@dataclass
class SceneEntry:
    path: str
    enabled: bool = True


class ContentDatabase:
    """Read-only view over a project's documents.

    Only one scene is active at a time; :meth:`open_scene` replaces it.
    """

    def __init__(self, root: Path, settings: Optional[SearchSettings] = None) -> None:
        self.root = Path(root).expanduser().resolve()
        if not self.root.is_dir():
            raise ProjectError(f"Project directory not found: {self.root}")
        self.settings = settings or SearchSettings()
        self.active_scene: Optional[Document] = None
        self._documents: Dict[str, Document] = {}
        self._guid_index: Optional[Dict[str, str]] = None
        self._scripts: Optional[Dict[str, str]] = None

    # -- listing ---------------------------------------------------

    def all_paths(self) -> List[str]:
        """Every file in the project as a sorted, ``/``-separated relative path."""
        return sorted(p.relative_to(self.root).as_posix() for p in self.root.rglob("*") if p.is_file())

    def asset_paths(self) -> List[str]:
        prefix = self.settings.asset_prefix
        return [p for p in self.all_paths() if p.startswith(prefix)]

    def _has_suffix(self, rel_path: str, suffixes: List[str]) -> bool:
        return any(rel_path.endswith(s) for s in suffixes)

    # -- guid index and scripts --------------------------------------

    def _build_indexes(self) -> None:
        suffixes = self.settings.scene_suffixes + self.settings.asset_suffixes + self.settings.script_suffixes
        guid_index: Dict[str, str] = {}
        scripts: Dict[str, str] = {}
        for rel_path in self.asset_paths():
            if not self._has_suffix(rel_path, suffixes):
                continue
            try:
                payload = read_json(self.root / rel_path, rel_path)
            except DocumentLoadError as exc:
                logger.warning("Not indexed: %s", exc)
                continue
            guid = payload.get("guid")
            if not isinstance(guid, str) or not guid:
                continue
            if guid in guid_index:
                logger.warning("Duplicate guid %s in %s and %s", guid, guid_index[guid], rel_path)
                continue
            guid_index[guid] = rel_path
            if self._has_suffix(rel_path, self.settings.script_suffixes):
                type_name = payload.get("type")
                if isinstance(type_name, str) and type_name:
                    scripts[guid] = type_name
        self._guid_index = guid_index
        self._scripts = scripts
        logger.debug("Indexed %d guid(s), %d script(s)", len(guid_index), len(scripts))

    @property
    def guid_index(self) -> Dict[str, str]:
        if self._guid_index is None:
            self._build_indexes()
        return self._guid_index

    @property
    def scripts(self) -> Dict[str, str]:
        if self._scripts is None:
            self._build_indexes()
        return self._scripts

    # -- documents ---------------------------------------------------

    def _read(self, rel_path: str) -> Document:
        return read_document(self.root / rel_path, rel_path, self.scripts, self.resolve_external)

    def load(self, rel_path: str) -> Document:
        """Load (and cache) the document at ``rel_path``.

        Raises:
            DocumentLoadError: if the file is missing or malformed.
        """
        document = self._documents.get(rel_path)
        if document is None:
            document = self._read(rel_path)
            self._documents[rel_path] = document
        return document

    def load_asset(self, rel_path: str) -> Optional[Document]:
        """Load an asset document, or ``None`` if it is not a loadable object."""
        if not self._has_suffix(rel_path, self.settings.asset_suffixes):
            return None
        try:
            return self.load(rel_path)
        except DocumentLoadError as exc:
            logger.warning("Skipping asset: %s", exc)
            return None

    def resolve_external(self, guid: str, file_id: int) -> Optional[Target]:
        """Resolve a reference into another document by guid and fileID."""
        rel_path = self.guid_index.get(guid)
        if rel_path is None:
            return None
        try:
            document = self.load(rel_path)
        except DocumentLoadError as exc:
            logger.debug("Target document unavailable: %s", exc)
            return None
        if not document.has_objects:
            return document
        return document.target(file_id)

    # -- scenes ------------------------------------------------------

    def build_settings_scenes(self) -> List[SceneEntry]:
        """Scenes listed in the build settings, in declared order."""
        settings_file = self.root / config.BUILD_SETTINGS_PATH
        if not settings_file.exists():
            return []
        try:
            payload = read_json(settings_file, config.BUILD_SETTINGS_PATH)
        except DocumentLoadError as exc:
            raise ProjectError(str(exc)) from exc

        entries: List[SceneEntry] = []
        for raw in payload.get("scenes", []):
            if isinstance(raw, str):
                entries.append(SceneEntry(path=raw))
            elif isinstance(raw, dict) and isinstance(raw.get("path"), str):
                entries.append(SceneEntry(path=raw["path"], enabled=bool(raw.get("enabled", True))))
            else:
                logger.warning("Ignoring malformed scene entry in build settings: %r", raw)
        return entries

    def enabled_scenes(self) -> List[SceneEntry]:
        return [s for s in self.build_settings_scenes() if s.enabled]

    def open_scene(self, rel_path: str) -> Document:
        """Load ``rel_path`` fresh and make it the active scene.

        Raises:
            DocumentLoadError: if the scene cannot be loaded; the previously
                active scene stays active.
        """
        document = self._read(rel_path)
        self.active_scene = document
        logger.debug("Opened scene %s", rel_path)
        return document

    def open_active_scene(self) -> Document:
        """Open the remembered scene, else the first enabled build scene.

        Raises:
            ProjectError: if there is no scene to open.
            DocumentLoadError: if the scene cannot be loaded.
        """
        rel_path = get_current_scene(self.root)
        if rel_path is None:
            enabled = self.enabled_scenes()
            if not enabled:
                raise ProjectError("No active scene. Use 'missingrefs open-scene <path>' first.")
            rel_path = enabled[0].path
        return self.open_scene(rel_path)


# ------------------------------------------------------------------
# Active scene state
# ------------------------------------------------------------------

def _read_state() -> Dict[str, Dict[str, str]]:
    if not config.STATE_FILE.exists():
        return {}
    try:
        payload = json.loads(config.STATE_FILE.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return {}
    return payload if isinstance(payload, dict) else {}


def set_current_scene(project_root: Path, rel_path: Optional[str]) -> None:
    """Remember ``rel_path`` as the active scene of ``project_root``."""
    state = _read_state()
    scenes = state.get("current_scenes")
    if not isinstance(scenes, dict):
        scenes = state["current_scenes"] = {}
    key = str(Path(project_root).resolve())
    if rel_path is None:
        scenes.pop(key, None)
    else:
        scenes[key] = rel_path
    config.STATE_FILE.parent.mkdir(parents=True, exist_ok=True)
    config.STATE_FILE.write_text(json.dumps(state, indent=2), encoding="utf-8")


def get_current_scene(project_root: Path) -> Optional[str]:
    scenes = _read_state().get("current_scenes", {})
    if not isinstance(scenes, dict):
        return None
    return scenes.get(str(Path(project_root).resolve()))
