"""Startup banner — mode-aware status output.

Prints a short startup banner with timing and the source/destination
roots.  Detects ``NO_COLOR`` / ``TERM`` for safe fallback.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tessera._types import TesseraMode
    from tessera.config import SiteConfig


# ---------------------------------------------------------------------------
# ANSI helpers — respect NO_COLOR (https://no-color.org)
# ---------------------------------------------------------------------------

def _supports_color() -> bool:
    """Return True if the terminal supports ANSI colors."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


_COLOR = _supports_color()

_RESET = "\033[0m" if _COLOR else ""
_BOLD = "\033[1m" if _COLOR else ""
_DIM = "\033[2m" if _COLOR else ""
_GREEN = "\033[32m" if _COLOR else ""
_YELLOW = "\033[33m" if _COLOR else ""
_TEAL = "\033[38;5;37m" if _COLOR else ""

_MODE_STYLES: dict[str, tuple[str, str]] = {
    "dev": (_GREEN, "dev"),
    "build": (_YELLOW, "build"),
}


def _mode_badge(mode: TesseraMode) -> str:
    """Return a styled [mode] badge."""
    color, label = _MODE_STYLES.get(mode, (_DIM, mode))
    return f"{color}[{label}]{_RESET}"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def print_banner(
    config: SiteConfig,
    page_count: int,
    mode: TesseraMode,
    *,
    load_ms: float = 0.0,
) -> None:
    """Print the tessera startup banner to stderr.

    Args:
        config: Resolved SiteConfig.
        page_count: Number of pages found in the source tree.
        mode: ``"dev"`` or ``"build"``.
        load_ms: Time spent loading config and data in milliseconds.

    """
    from tessera import __version__

    header = f"  {_TEAL}{_BOLD}▦{_RESET}  tessera {_DIM}v{__version__}{_RESET}  {_mode_badge(mode)}"

    lines: list[str] = [
        "",
        header,
        f"  {_DIM}{'─' * 43}{_RESET}",
    ]

    pages_label = "page" if page_count == 1 else "pages"
    timing = f" {_DIM}in {load_ms:.0f}ms{_RESET}" if load_ms > 0 else ""
    lines.append(f"  {_DIM}├─{_RESET} {page_count} {pages_label} found{timing}")
    lines.append(f"  {_DIM}├─{_RESET} source: {_DIM}{config.source}{_RESET}")
    lines.append(f"  {_DIM}├─{_RESET} data: {_DIM}{config.data_file}{_RESET}")
    lines.append(f"  {_DIM}└─{_RESET} output: {_DIM}{config.dest}{_RESET}")

    if mode == "dev":
        lines.append("")
        lines.append(f"  {_DIM}Watching for changes...{_RESET}")

    lines.append("")

    print("\n".join(lines), file=sys.stderr)
