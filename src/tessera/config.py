"""Tessera configuration.

SiteConfig is the central configuration object, frozen after creation.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class SiteConfig:
    """Configuration for a tessera build.

    Attributes:
        source: Directory containing page and partial templates plus the
                data file.  Resolved (absolute, symlinks followed) on construction.
        dest: Output directory mirroring the source tree's pages.
        template_suffix: Suffix shared by pages and partials.
        output_suffix: Suffix given to rendered pages.
        partial_prefix: Leading marker that makes a template a partial.
        data_file: Name of the JSON render context file in ``source``.
        debounce_ms: Per-path coalescing window for watch events.
        fetch_timeout: Seconds before an ``@svg`` / ``@text`` fetch gives up.
        indent: Indent unit used when beautifying build output.
        rerender_on_partial_delete: Re-render pages that still reference a
            deleted partial, so the missing include surfaces immediately.

    """

    source: Path
    dest: Path
    template_suffix: str = ".jinja"
    output_suffix: str = ".html"
    partial_prefix: str = "_"
    data_file: str = "data.json"
    debounce_ms: int = 200
    fetch_timeout: float = 10.0
    indent: str = "\t"
    rerender_on_partial_delete: bool = True

    def __post_init__(self) -> None:
        # Resolve both roots so Path.is_relative_to() checks agree even when
        # a root is reached through a symlink.
        for name in ("source", "dest"):
            object.__setattr__(self, name, Path(getattr(self, name)).resolve())

    @property
    def data_path(self) -> Path:
        """Absolute path to the data file."""
        return self.source / self.data_file

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000
