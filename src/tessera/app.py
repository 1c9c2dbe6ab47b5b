"""Tessera application — the build and dev entry points.

``build`` renders every page once, beautified, and exits.  ``dev`` watches
the source tree and re-renders only what each change makes stale.
"""

from __future__ import annotations

import asyncio
import sys
import time
from pathlib import Path
from typing import TYPE_CHECKING

from tessera.config_loader import load_config
from tessera.context import ContextStore
from tessera.export.writer import BatchResult, BatchWriter, format_elapsed
from tessera.observability import BuildCollector, PageFailed
from tessera.paths import all_pages
from tessera.rendering.fetch import RemoteFetcher
from tessera.rendering.renderer import Renderer

if TYPE_CHECKING:
    from tessera._types import Fetcher
    from tessera.config import SiteConfig
    from tessera.observability.log import EventLog


def _load_context(config: SiteConfig) -> ContextStore:
    """Load the render context.

    Raises:
        ConfigParseError: If the data file is missing or malformed.  Fatal
            at startup in both modes: there is no previous context to keep.

    """
    context = ContextStore(config.data_path)
    context.load()
    return context


async def _build_all(
    config: SiteConfig,
    context: ContextStore,
    *,
    fetch: Fetcher,
    collector: BuildCollector,
) -> BatchResult:
    """Render every page with beautification and write it."""
    renderer = Renderer(config, context, fetch=fetch, beautify=True)
    writer = BatchWriter(config, renderer, collector=collector)
    pages = await asyncio.to_thread(all_pages, config)
    return await writer.write_all(pages)


async def run_build(
    config: SiteConfig,
    *,
    fetch: Fetcher | None = None,
    collector: BuildCollector | None = None,
) -> BatchResult:
    """Awaitable core of :func:`build`.

    A fetcher is created (and closed) here unless *fetch* is given.
    """
    from tessera.banner import print_banner

    t0 = time.perf_counter()
    context = _load_context(config)
    load_ms = (time.perf_counter() - t0) * 1000
    collector = collector if collector is not None else BuildCollector()

    print_banner(config, len(all_pages(config)), mode="build", load_ms=load_ms)

    owned = RemoteFetcher(timeout=config.fetch_timeout) if fetch is None else None
    try:
        result = await _build_all(
            config, context, fetch=fetch or owned, collector=collector,
        )
    finally:
        if owned is not None:
            owned.close()

    _print_build_summary(result, config, collector.log)
    return result


async def run_dev(
    config: SiteConfig,
    *,
    stop_event: asyncio.Event | None = None,
    initial_build: bool = False,
    fetch: Fetcher | None = None,
    collector: BuildCollector | None = None,
) -> None:
    """Awaitable core of :func:`dev`.

    Runs until *stop_event* is set (or forever).  Batches already dispatched
    when the watcher stops are allowed to finish; pending debounced events
    are dropped.  The initial build and every rebuild share one fetcher.

    """
    from tessera.banner import print_banner
    from tessera.content.watcher import ContentWatcher, Debouncer
    from tessera.reactive.pipeline import RebuildPipeline
    from tessera.reactive.resolver import ImpactResolver

    t0 = time.perf_counter()
    context = _load_context(config)
    load_ms = (time.perf_counter() - t0) * 1000
    collector = collector if collector is not None else BuildCollector()

    owned = RemoteFetcher(timeout=config.fetch_timeout) if fetch is None else None
    fetch = fetch or owned
    try:
        if initial_build:
            await _build_all(config, context, fetch=fetch, collector=collector)

        renderer = Renderer(config, context, fetch=fetch, beautify=False)
        writer = BatchWriter(config, renderer, collector=collector)
        pipeline = RebuildPipeline(
            ImpactResolver(config), writer, context, collector=collector,
        )

        print_banner(config, len(all_pages(config)), mode="dev", load_ms=load_ms)

        watcher = ContentWatcher(config)
        debouncer = Debouncer(config.debounce_seconds, pipeline.handle_change)

        print("Ready for changes", file=sys.stderr)
        try:
            async for event in watcher.changes(stop_event):
                debouncer.push(event)
        finally:
            debouncer.cancel()
            await debouncer.join()
            _print_dev_summary(collector.log)
    finally:
        if owned is not None:
            owned.close()


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


def _print_build_summary(result: BatchResult, config: SiteConfig, log: EventLog) -> None:
    """Print build completion summary to stderr."""
    counts = log.stats()["by_type"]
    lines = [
        "",
        "─" * 41,
        f"  Rendered {_plural(counts.get('PageRendered', 0), 'page')}",
    ]
    if result.failures:
        lines.append(f"  Failed {_plural(counts.get('PageFailed', 0), 'page')}:")
        lines.extend(f"    {f.path.name}: {f.error}" for f in result.failures)
    lines.append(f"  Output: {config.dest}")
    lines.append(f"  Done in {format_elapsed(result.duration_ms)}")

    print("\n".join(lines), file=sys.stderr)


def _print_dev_summary(log: EventLog, *, recent_failures: int = 5) -> None:
    """Print what the watch session did, with its latest failures."""
    counts = log.stats()["by_type"]
    lines = [
        "",
        f"  Handled {_plural(counts.get('ChangeHandled', 0), 'change')}: "
        f"rendered {_plural(counts.get('PageRendered', 0), 'page')}, "
        f"removed {_plural(counts.get('PageRemoved', 0), 'file')}",
    ]
    failed = log.query(event_type=PageFailed, limit=recent_failures)
    if failed:
        lines.append(f"  Latest failures ({counts.get('PageFailed', 0)} total):")
        lines.extend(f"    {Path(e.path).name}: {e.message}" for e in reversed(failed))

    print("\n".join(lines), file=sys.stderr)


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------


def build(source: str | Path, dest: str | Path, **kwargs: object) -> BatchResult:
    """Render every page in *source* to HTML in *dest*, beautified.

    Args:
        source: Source tree containing templates and the data file.
        dest: Destination directory.
        **kwargs: Override SiteConfig fields.

    Returns:
        The batch result; check ``result.ok`` for per-page failures.

    Raises:
        ConfigParseError: If the data file is missing or malformed.

    """
    config = load_config(Path(source), Path(dest), **kwargs)
    return asyncio.run(run_build(config))


def dev(
    source: str | Path,
    dest: str | Path,
    *,
    initial_build: bool = False,
    **kwargs: object,
) -> None:
    """Watch *source* and incrementally re-render changed pages into *dest*.

    Args:
        source: Source tree containing templates and the data file.
        dest: Destination directory.
        initial_build: Render every page (beautified) before watching.
        **kwargs: Override SiteConfig fields.

    """
    config = load_config(Path(source), Path(dest), **kwargs)
    try:
        asyncio.run(run_dev(config, initial_build=initial_build))
    except KeyboardInterrupt:
        print("\n  Stopped watching", file=sys.stderr)
