"""Configuration manager for missingrefs using TOML files.

Effective settings are layered: built-in defaults, then the ``[search]`` and
``[logging]`` sections of the global ``config.toml``, then the same sections
of ``missingrefs.toml`` in the project root.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import toml

from . import config

logger = logging.getLogger(__name__)


@dataclass
class SearchSettings:
    asset_prefix: str = config.DEFAULT_SEARCH["asset_prefix"]
    missing_marker: str = config.DEFAULT_SEARCH["missing_marker"]
    max_depth: int = config.DEFAULT_SEARCH["max_depth"]
    scene_suffixes: List[str] = field(default_factory=lambda: list(config.DEFAULT_SEARCH["scene_suffixes"]))
    asset_suffixes: List[str] = field(default_factory=lambda: list(config.DEFAULT_SEARCH["asset_suffixes"]))
    script_suffixes: List[str] = field(default_factory=lambda: list(config.DEFAULT_SEARCH["script_suffixes"]))
    log_level: str = config.DEFAULT_LOG_LEVEL

    def as_dict(self) -> Dict[str, Any]:
        return {
            "asset_prefix": self.asset_prefix,
            "missing_marker": self.missing_marker,
            "max_depth": self.max_depth,
            "scene_suffixes": list(self.scene_suffixes),
            "asset_suffixes": list(self.asset_suffixes),
            "script_suffixes": list(self.script_suffixes),
            "log_level": self.log_level,
        }


def _read_toml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            return toml.load(f)
    except (OSError, toml.TomlDecodeError) as exc:
        logger.warning("Ignoring unreadable config file %s: %s", path, exc)
        return {}


def load_full_config() -> Dict[str, Any]:
    """Load the entire global TOML config (all sections)."""
    return _read_toml(config.CONFIG_FILE)


def _coerce(key: str, value: Any) -> Any:
    """Convert a raw config value to the type of its default."""
    default = config.DEFAULT_SEARCH[key]
    if isinstance(default, list):
        if isinstance(value, str):
            return [v.strip() for v in value.split(",") if v.strip()]
        return [str(v) for v in value]
    if isinstance(default, int):
        number = int(value)
        if key == "max_depth" and number < 1:
            raise ValueError(f"max_depth must be at least 1, got {number}")
        return number
    text = str(value)
    if key == "missing_marker" and not text:
        raise ValueError("missing_marker must not be empty")
    return text


def _apply(settings: SearchSettings, payload: Dict[str, Any], source: str) -> None:
    search = payload.get("search", {})
    if not isinstance(search, dict):
        logger.warning("Ignoring [search] in %s: expected a table, got %r", source, search)
        search = {}
    for key, value in search.items():
        if key not in config.DEFAULT_SEARCH:
            logger.warning("Unknown search setting '%s' in %s", key, source)
            continue
        try:
            setattr(settings, key, _coerce(key, value))
        except (TypeError, ValueError):
            logger.warning("Invalid value for '%s' in %s: %r", key, source, value)
    logging_section = payload.get("logging", {})
    if not isinstance(logging_section, dict):
        logger.warning("Ignoring [logging] in %s: expected a table, got %r", source, logging_section)
        logging_section = {}
    level = logging_section.get("level")
    if level:
        settings.log_level = str(level).upper()


def load_settings(project_root: Optional[Path] = None) -> SearchSettings:
    """Return effective settings for ``project_root``.

    Args:
        project_root: Project directory whose ``missingrefs.toml`` overrides
            the global config. ``None`` uses the global config only.

    Returns:
        A populated :class:`SearchSettings`.
    """
    settings = SearchSettings()
    _apply(settings, load_full_config(), str(config.CONFIG_FILE))
    if project_root is not None:
        project_file = Path(project_root) / config.PROJECT_CONFIG_NAME
        _apply(settings, _read_toml(project_file), str(project_file))
    return settings


def save_setting(key: str, value: str) -> bool:
    """Persist one ``[search]`` setting to the global config.

    Preserves every other section in the file.

    Returns:
        True if saved, False if the key is unknown or the value invalid.
    """
    if key not in config.DEFAULT_SEARCH:
        return False
    try:
        coerced = _coerce(key, value)
    except (TypeError, ValueError):
        return False

    payload = load_full_config()
    payload.setdefault("search", {})[key] = coerced
    config.CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    with open(config.CONFIG_FILE, "w", encoding="utf-8") as f:
        toml.dump(payload, f)
    return True
