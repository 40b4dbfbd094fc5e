"""Typer-based CLI for finding missing references in a content project."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import __version__, config
from .config_manager import load_settings, save_setting
from .content import ContentDatabase, get_current_scene, set_current_scene
from .errors import DocumentLoadError, ProjectError
from .finder import find_in_all_scenes, find_in_assets, find_in_current_scene

console = Console()

app = typer.Typer(
    help="🔎 missingrefs: find missing components and dangling references in scenes and assets.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

PROJECT_OPTION = typer.Option(
    None,
    "--project",
    "-p",
    help="Project directory (default: $MISSINGREFS_PROJECT or the current directory).",
)


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"missingrefs v{__version__}")
        raise typer.Exit()


def setup_logging(level: str) -> None:
    """Attach a single Rich handler to the package logger."""
    pkg_logger = logging.getLogger("missingrefs")
    if not any(isinstance(h, RichHandler) for h in pkg_logger.handlers):
        handler = RichHandler(console=Console(stderr=True), show_path=False, markup=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        pkg_logger.addHandler(handler)
    pkg_logger.setLevel(getattr(logging, level.upper(), logging.INFO))


@app.callback()
def main(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Log debug details."),
):
    """missingrefs: report missing parts and dangling object references."""
    ctx.obj = {"verbose": verbose}


def _open_database(ctx: typer.Context, project: Optional[Path]) -> ContentDatabase:
    root = project or config.default_project_dir()
    settings = load_settings(root)
    verbose = bool((ctx.obj or {}).get("verbose"))
    setup_logging("DEBUG" if verbose else settings.log_level)
    try:
        return ContentDatabase(root, settings)
    except ProjectError as exc:
        raise typer.BadParameter(str(exc))


@app.command("scene")
def search_scene(ctx: typer.Context, project: Optional[Path] = PROJECT_OPTION):
    """Search in the current scene."""
    db = _open_database(ctx, project)
    try:
        db.open_active_scene()
    except (ProjectError, DocumentLoadError) as exc:
        raise typer.BadParameter(str(exc))
    find_in_current_scene(db)


@app.command("all-scenes")
def search_all_scenes(ctx: typer.Context, project: Optional[Path] = PROJECT_OPTION):
    """Search in every enabled scene of the build settings, one at a time."""
    db = _open_database(ctx, project)
    try:
        find_in_all_scenes(db)
    except ProjectError as exc:
        raise typer.BadParameter(str(exc))


@app.command("assets")
def search_assets(ctx: typer.Context, project: Optional[Path] = PROJECT_OPTION):
    """Search in the top-level objects of every project asset."""
    db = _open_database(ctx, project)
    find_in_assets(db)


@app.command("list-scenes")
def list_scenes(ctx: typer.Context, project: Optional[Path] = PROJECT_OPTION):
    """List build-settings scenes; * marks the current one."""
    db = _open_database(ctx, project)
    try:
        scenes = db.build_settings_scenes()
    except ProjectError as exc:
        raise typer.BadParameter(str(exc))

    if not scenes:
        typer.echo("No scenes in build settings.")
        raise typer.Exit(code=0)

    current = get_current_scene(db.root)
    for entry in scenes:
        marker = "*" if entry.path == current else " "
        state = "" if entry.enabled else "  (disabled)"
        typer.echo(f"{marker} {entry.path}{state}")


@app.command("open-scene")
def open_scene(
    ctx: typer.Context,
    scene: str = typer.Argument(..., help="Project-relative scene path, e.g. Assets/Scenes/Main.scene."),
    project: Optional[Path] = PROJECT_OPTION,
):
    """Make a scene the current one for 'missingrefs scene'."""
    db = _open_database(ctx, project)
    try:
        db.open_scene(scene)
    except DocumentLoadError as exc:
        raise typer.BadParameter(str(exc))
    set_current_scene(db.root, scene)
    typer.echo(f"Opened scene '{scene}'.")


@app.command("current-scene")
def current_scene(ctx: typer.Context, project: Optional[Path] = PROJECT_OPTION):
    """Print the current scene."""
    db = _open_database(ctx, project)
    typer.echo(get_current_scene(db.root) or "No scene opened")


@app.command("show-config")
def show_config(project: Optional[Path] = PROJECT_OPTION):
    """Show effective search settings."""
    root = project or config.default_project_dir()
    settings = load_settings(root)

    table = Table(title=f"missingrefs settings ({root})")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    for key, value in settings.as_dict().items():
        if isinstance(value, list):
            value = ", ".join(value)
        table.add_row(key, str(value))
    console.print(table)


@app.command("set-config")
def set_config(
    key: str = typer.Argument(..., help="Search setting, e.g. asset_prefix or max_depth."),
    value: str = typer.Argument(..., help="New value; lists are comma-separated."),
):
    """Persist a search setting in the global config file."""
    if not save_setting(key, value):
        raise typer.BadParameter(f"Invalid setting '{key}' = '{value}'.")
    typer.echo(f"Saved {key} = {value}")


if __name__ == "__main__":
    app()
