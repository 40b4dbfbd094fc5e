"""Tests for layered TOML configuration."""

from pathlib import Path

import toml

from missingrefs import config
from missingrefs.config_manager import load_settings, save_setting
from missingrefs.content import ContentDatabase
from missingrefs.finder import find_in_current_scene


class TestSettings:
    """Test load_settings() and save_setting()."""

    def test_defaults(self):
        settings = load_settings()
        assert settings.asset_prefix == "Assets/"
        assert settings.missing_marker == "Missing"
        assert settings.max_depth == 100
        assert settings.log_level == "INFO"

    def test_global_then_project(self, temp_dir: Path):
        config.CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
        config.CONFIG_FILE.write_text(toml.dumps({"search": {"max_depth": 20, "asset_prefix": "Content/"}}))
        (temp_dir / config.PROJECT_CONFIG_NAME).write_text(
            toml.dumps({"search": {"max_depth": 50}, "logging": {"level": "debug"}})
        )

        settings = load_settings(temp_dir)
        assert settings.max_depth == 50
        assert settings.asset_prefix == "Content/"
        assert settings.log_level == "DEBUG"

    def test_invalid_values_ignored(self, temp_dir: Path, caplog):
        (temp_dir / config.PROJECT_CONFIG_NAME).write_text(
            toml.dumps({"search": {"max_depth": "deep", "colour": "red"}})
        )
        settings = load_settings(temp_dir)
        assert settings.max_depth == 100
        assert "colour" in caplog.text

    def test_unreadable_file_ignored(self, temp_dir: Path):
        (temp_dir / config.PROJECT_CONFIG_NAME).write_text("[search\nmax_depth = ")
        assert load_settings(temp_dir).max_depth == 100

    def test_save_setting(self):
        assert save_setting("asset_suffixes", ".prefab, .mat")
        assert save_setting("max_depth", "12")
        assert not save_setting("unknown", "x")
        assert not save_setting("max_depth", "twelve")

        settings = load_settings()
        assert settings.asset_suffixes == [".prefab", ".mat"]
        assert settings.max_depth == 12

    def test_max_depth_below_one_rejected(self, temp_dir: Path, caplog):
        """A depth of zero would stop every walk at its roots."""
        assert not save_setting("max_depth", "0")
        assert not save_setting("max_depth", "-3")

        (temp_dir / config.PROJECT_CONFIG_NAME).write_text(toml.dumps({"search": {"max_depth": 0}}))
        assert load_settings(temp_dir).max_depth == 100
        assert "max_depth" in caplog.text

    def test_empty_missing_marker_rejected(self, temp_dir: Path, caplog):
        """An empty prefix would match every marker."""
        assert not save_setting("missing_marker", "")

        (temp_dir / config.PROJECT_CONFIG_NAME).write_text(toml.dumps({"search": {"missing_marker": ""}}))
        assert load_settings(temp_dir).missing_marker == "Missing"
        assert "missing_marker" in caplog.text

    def test_non_table_sections_ignored(self, temp_dir: Path, caplog):
        (temp_dir / config.PROJECT_CONFIG_NAME).write_text('search = 1\nlogging = "x"\n')

        settings = load_settings(temp_dir)
        assert settings.max_depth == 100
        assert settings.log_level == "INFO"
        assert "[search]" in caplog.text
        assert "[logging]" in caplog.text


class TestSearchWithSavedSettings:
    """Saved settings flow into the search actions."""

    def test_rejected_depth_keeps_nested_findings(self, sample_project_path: Path):
        save_setting("max_depth", "0")
        db = ContentDatabase(sample_project_path, load_settings(sample_project_path))
        db.open_scene("Assets/Scenes/Main.scene")

        findings = find_in_current_scene(db)
        assert [f.full_path for f in findings] == ["Root/Enemies"]
