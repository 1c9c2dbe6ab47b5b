"""Tessera error hierarchy.

All tessera-specific errors inherit from TesseraError for easy catching.
Per-page errors (render, fetch, filesystem) carry the offending path so a
batch can report every failure without aborting.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


class TesseraError(Exception):
    """Base error for all tessera operations."""

    def __init__(self, message: str, *, path: Path | str | None = None) -> None:
        super().__init__(message)
        self.path = path


class ConfigError(TesseraError):
    """Invalid tool configuration (tessera.yaml / tessera.toml)."""


class ConfigParseError(ConfigError):
    """The data file is missing, unreadable, or not a JSON object."""


class TemplateRenderError(TesseraError):
    """Template syntax error, missing include, or other engine failure."""


class RemoteFetchError(TesseraError):
    """Network failure while expanding an ``@svg`` / ``@text`` directive."""


class FileSystemError(TesseraError):
    """Read, write, or delete failure on a single path."""
