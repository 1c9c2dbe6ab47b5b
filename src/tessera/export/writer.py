"""Batch writer — render pages concurrently and persist them.

Every page in a batch is rendered and written as its own task; the batch
completes when all of them have finished.  A failure on one page is recorded
and reported, never propagated, so the remaining pages are still written.
"""

from __future__ import annotations

import asyncio
import sys
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from tessera._errors import (
    FileSystemError,
    RemoteFetchError,
    TemplateRenderError,
)
from tessera.paths import to_destination

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from tessera.config import SiteConfig
    from tessera.observability.collector import BuildCollector
    from tessera.rendering.renderer import Renderer


_FAILURE_LABELS: dict[type[Exception], str] = {
    TemplateRenderError: "Template error",
    RemoteFetchError: "Fetch error",
    FileSystemError: "File error",
}


@dataclass(frozen=True, slots=True)
class WrittenPage:
    """Record of a single page written during a batch.

    Attributes:
        source: Page source path.
        output: Destination path written.
        size_bytes: Size of the written file in bytes.
        duration_ms: Time taken to render and write this page.

    """

    source: Path
    output: Path
    size_bytes: int
    duration_ms: float


@dataclass(frozen=True, slots=True)
class RemovedFile:
    """A destination path passed to ``remove_all``."""

    path: Path
    existed: bool


@dataclass(frozen=True, slots=True)
class PageFailure:
    """A page (or destination path) that failed within a batch."""

    path: Path
    error: Exception


@dataclass(frozen=True, slots=True)
class BatchResult:
    """Aggregate result of one write or remove batch.

    Attributes:
        written: Pages rendered and written successfully.
        removed: Destination paths processed by a removal.
        failures: Per-item failures; the rest of the batch still ran.
        duration_ms: Wall-clock time for the batch.

    """

    written: tuple[WrittenPage, ...] = ()
    removed: tuple[RemovedFile, ...] = ()
    failures: tuple[PageFailure, ...] = ()
    duration_ms: float = field(default=0.0, compare=False)

    @property
    def ok(self) -> bool:
        return not self.failures

    def merge(self, other: BatchResult) -> BatchResult:
        """Combine two results (e.g. a removal followed by a write)."""
        return BatchResult(
            written=self.written + other.written,
            removed=self.removed + other.removed,
            failures=self.failures + other.failures,
            duration_ms=self.duration_ms + other.duration_ms,
        )


def format_elapsed(ms: float) -> str:
    """``842 ms`` below one second, ``1.5 s`` above."""
    if ms >= 1000:
        return f"{round(ms / 1000, 2):g} s"
    return f"{round(ms)} ms"


def _write_text(target: Path, text: str) -> int:
    data = text.encode("utf-8")
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
    except OSError as exc:
        msg = f"Cannot write {target}: {exc}"
        raise FileSystemError(msg, path=target) from exc
    return len(data)


def _remove_file(target: Path) -> bool:
    try:
        target.unlink()
    except FileNotFoundError:
        return False
    except OSError as exc:
        msg = f"Cannot remove {target}: {exc}"
        raise FileSystemError(msg, path=target) from exc
    return True


class BatchWriter:
    """Renders pages and writes them to their mapped destination paths.

    Args:
        config: Frozen site configuration.
        renderer: Renderer used for every page in every batch.
        collector: Optional event collector.

    """

    def __init__(
        self,
        config: SiteConfig,
        renderer: Renderer,
        *,
        collector: BuildCollector | None = None,
    ) -> None:
        self._config = config
        self._renderer = renderer
        self._collector = collector

    async def write_all(self, sources: Iterable[Path]) -> BatchResult:
        """Render and write every page in *sources* concurrently.

        Duplicate paths are rendered once.  Failures are collected per page.
        """
        unique = tuple(dict.fromkeys(sources))
        if not unique:
            return BatchResult()

        print("Starting 'html'...", file=sys.stderr)
        start = time.perf_counter()

        outcomes = await asyncio.gather(
            *(self._write_one(source) for source in unique),
            return_exceptions=True,
        )

        written: list[WrittenPage] = []
        failures: list[PageFailure] = []
        for source, outcome in zip(unique, outcomes, strict=True):
            if isinstance(outcome, WrittenPage):
                written.append(outcome)
            elif isinstance(outcome, Exception):
                failures.append(self._fail(source, outcome))
            else:
                raise outcome

        elapsed = (time.perf_counter() - start) * 1000
        print(f"Finished 'html' after {format_elapsed(elapsed)}", file=sys.stderr)
        return BatchResult(
            written=tuple(written),
            failures=tuple(failures),
            duration_ms=elapsed,
        )

    async def remove_all(self, targets: Iterable[Path]) -> BatchResult:
        """Delete each destination path.  Missing files are not an error."""
        unique = tuple(dict.fromkeys(targets))
        if not unique:
            return BatchResult()

        start = time.perf_counter()
        outcomes = await asyncio.gather(
            *(asyncio.to_thread(_remove_file, target) for target in unique),
            return_exceptions=True,
        )

        removed: list[RemovedFile] = []
        failures: list[PageFailure] = []
        for target, outcome in zip(unique, outcomes, strict=True):
            if isinstance(outcome, bool):
                removed.append(RemovedFile(path=target, existed=outcome))
                if outcome:
                    print(f"  Removed {target.name}", file=sys.stderr)
                if self._collector is not None:
                    self._collector.record_remove(str(target), existed=outcome)
            elif isinstance(outcome, Exception):
                failures.append(self._fail(target, outcome))
            else:
                raise outcome

        return BatchResult(
            removed=tuple(removed),
            failures=tuple(failures),
            duration_ms=(time.perf_counter() - start) * 1000,
        )

    async def _write_one(self, source: Path) -> WrittenPage:
        t0 = time.perf_counter()
        html = await self._renderer.render(source)
        target = to_destination(source, self._config)
        size = await asyncio.to_thread(_write_text, target, html)
        elapsed = (time.perf_counter() - t0) * 1000

        if self._collector is not None:
            self._collector.record_render(
                str(source), str(target), size_bytes=size, duration_ms=elapsed,
            )
        return WrittenPage(
            source=source, output=target, size_bytes=size, duration_ms=elapsed,
        )

    def _fail(self, path: Path, error: Exception) -> PageFailure:
        label = next(
            (text for cls, text in _FAILURE_LABELS.items() if isinstance(error, cls)),
            "Error",
        )
        print(f"  {label}: {path.name}: {error}", file=sys.stderr)
        if self._collector is not None:
            self._collector.record_failure(str(path), error)
        return PageFailure(path=path, error=error)
