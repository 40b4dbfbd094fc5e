"""Configuration paths and search defaults for missingrefs."""

from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(os.environ.get("MISSINGREFS_HOME", str(Path.home() / ".missingrefs"))).expanduser()
CONFIG_FILE = BASE_DIR / "config.toml"
STATE_FILE = BASE_DIR / "state.json"

PROJECT_CONFIG_NAME = "missingrefs.toml"
BUILD_SETTINGS_PATH = "ProjectSettings/build_settings.json"

# Context label used for findings in project assets
PROJECT_CONTEXT = "Project"

DEFAULT_SEARCH = {
    "asset_prefix": "Assets/",
    "missing_marker": "Missing",
    "max_depth": 100,
    "scene_suffixes": [".scene"],
    "asset_suffixes": [".prefab", ".asset"],
    "script_suffixes": [".script"],
}
DEFAULT_LOG_LEVEL = "INFO"


def default_project_dir() -> Path:
    """Project directory from ``MISSINGREFS_PROJECT``, else the working directory."""
    raw = os.environ.get("MISSINGREFS_PROJECT", "")
    return Path(raw).expanduser() if raw else Path.cwd()

