"""Render context store — the shared data every page renders against.

The store owns a single JSON object loaded from the data file.  ``load()``
always re-reads the file (no cache to invalidate) and replaces the held
context wholesale; a failed load leaves the previous context in place.

Thread Safety:
    Single writer (the rebuild pipeline).  Readers only ever see a complete
    mapping because the reference is swapped, never mutated.

"""

from __future__ import annotations

import json
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from tessera._errors import ConfigParseError

if TYPE_CHECKING:
    from pathlib import Path

    from tessera._types import Context


class ContextStore:
    """Explicitly owned holder for the current render context.

    Args:
        path: Absolute path to the JSON data file.

    """

    __slots__ = ("_data", "_path")

    def __init__(self, path: Path) -> None:
        self._path = path
        self._data: Context | None = None

    @property
    def path(self) -> Path:
        return self._path

    @property
    def loaded(self) -> bool:
        """Whether a context has been loaded successfully at least once."""
        return self._data is not None

    @property
    def data(self) -> Context:
        """The current context.

        Raises:
            ConfigParseError: If no load has succeeded yet.

        """
        if self._data is None:
            msg = f"Render context not loaded from {self._path}"
            raise ConfigParseError(msg, path=self._path)
        return self._data

    def load(self) -> Context:
        """Read and parse the data file, replacing the held context.

        Raises:
            ConfigParseError: If the file is missing, unreadable, malformed,
                or does not contain a JSON object.

        """
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            msg = f"Cannot read data file {self._path}: {exc}"
            raise ConfigParseError(msg, path=self._path) from exc

        try:
            parsed: Any = json.loads(raw)
        except json.JSONDecodeError as exc:
            msg = f"Malformed data file {self._path.name}: {exc}"
            raise ConfigParseError(msg, path=self._path) from exc

        if not isinstance(parsed, dict):
            msg = f"Data file {self._path.name} must contain a JSON object"
            raise ConfigParseError(msg, path=self._path)

        self._data = MappingProxyType(parsed)
        return self._data

    def reload(self) -> Context:
        """Re-read the data file; alias of :meth:`load` for the watch loop."""
        return self.load()
