"""Rebuild pipeline — connects the watcher to the batch writer.

Orchestrates the change propagation flow:
    1. ContentWatcher detects a file change (ChangeEvent), debounced per path
    2. ImpactResolver classifies it and computes the rebuild plan
    3. Data file changes reload the render context first; a bad data file
       skips the event and keeps the previous context
    4. BatchWriter removes stale destinations, then renders the impact set
"""

from __future__ import annotations

import sys
import time
from typing import TYPE_CHECKING

from tessera._errors import ConfigParseError
from tessera.export.writer import BatchResult

if TYPE_CHECKING:
    from tessera.content.watcher import ChangeEvent
    from tessera.context import ContextStore
    from tessera.export.writer import BatchWriter
    from tessera.observability.collector import BuildCollector
    from tessera.reactive.resolver import ImpactResolver


class RebuildPipeline:
    """Coordinates one change event from resolution to written output.

    Args:
        resolver: Classifies events and computes impact sets.
        writer: Renders and writes (or removes) files.
        context: The render context store, reloaded on data file changes.
        collector: Optional event collector.

    """

    def __init__(
        self,
        resolver: ImpactResolver,
        writer: BatchWriter,
        context: ContextStore,
        *,
        collector: BuildCollector | None = None,
    ) -> None:
        self._resolver = resolver
        self._writer = writer
        self._context = context
        self._collector = collector

    async def handle_change(self, event: ChangeEvent) -> BatchResult | None:
        """Process a single change event.

        Returns:
            The merged batch result, or None if the event was skipped
            because the data file could not be reloaded.

        """
        t0 = time.perf_counter()
        plan = await self._resolver.resolve(event)

        if plan.reload_context and not self._reload_context():
            return None

        if plan.is_empty:
            return BatchResult()

        _log_change(event, len(plan.render), len(plan.remove))

        result = BatchResult()
        if plan.remove:
            result = result.merge(await self._writer.remove_all(plan.remove))
        if plan.render:
            result = result.merge(await self._writer.write_all(plan.render))

        if self._collector is not None:
            self._collector.record_change(
                str(event.path),
                kind=event.kind,
                category=event.category,
                pages_rendered=len(plan.render),
                files_removed=len(plan.remove),
                duration_ms=(time.perf_counter() - t0) * 1000,
            )
        return result

    def _reload_context(self) -> bool:
        """Reload the data file; on failure keep the previous context."""
        path = str(self._context.path)
        try:
            data = self._context.reload()
        except ConfigParseError as exc:
            print(f"  Data error: {exc} (keeping previous data)", file=sys.stderr)
            if self._collector is not None:
                self._collector.record_reload(path, ok=False)
            return False

        if self._collector is not None:
            self._collector.record_reload(path, ok=True, keys=len(data))
        return True


def _log_change(event: ChangeEvent, render_count: int, remove_count: int) -> None:
    """Log a dispatched change to stderr."""
    parts = []
    if render_count:
        parts.append(f"{render_count} {'page' if render_count == 1 else 'pages'} to render")
    if remove_count:
        parts.append(f"{remove_count} {'file' if remove_count == 1 else 'files'} to remove")
    summary = ", ".join(parts) or "nothing to do"
    print(f"  {event.path.name} {event.kind} — {summary}", file=sys.stderr)
