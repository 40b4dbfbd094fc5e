"""Exceptions raised at the host and inspection seams."""

from __future__ import annotations


class MissingRefsError(Exception):
    """Base class for missingrefs errors."""


class DocumentLoadError(MissingRefsError):
    """A scene or asset document could not be read or parsed."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Failed to load '{path}': {reason}")
        self.path = path
        self.reason = reason


class MarkerUnavailable(MissingRefsError):
    """A part cannot provide the raw textual marker of a reference property."""


class ProjectError(MissingRefsError):
    """The project directory or its build settings are unusable."""
