"""File watcher — feeds source-tree changes into the rebuild pipeline.

Monitors the source tree for changes and turns raw filesystem notifications
into categorized ``ChangeEvent`` objects:

- Template changed (page or partial) -> impact resolution -> re-render
- Data file changed -> context reload -> full rebuild
- Anything else -> dropped

Editors often save in several steps (write + rename, delete + create), so
events are coalesced per path by ``Debouncer`` before dispatch.
"""

from __future__ import annotations

import asyncio
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from watchfiles import Change, awatch

from tessera.paths import is_template

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable

    from tessera._types import ChangeCategory, ChangeKind
    from tessera.config import SiteConfig


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    """A file change detected by the watcher.

    Attributes:
        path: Absolute path to the changed file.
        kind: Type of filesystem change.
        category: What kind of file changed (determines the rebuild path).

    """

    path: Path
    kind: ChangeKind
    category: ChangeCategory


# Mapping from watchfiles Change enum to our kind literals.
_CHANGE_KIND_MAP: dict[Change, ChangeKind] = {
    Change.added: "created",
    Change.modified: "modified",
    Change.deleted: "deleted",
}


def categorize_change(path: Path, config: SiteConfig) -> ChangeCategory | None:
    """Determine the category of a changed file.

    Returns None if the file is outside the source tree, inside the
    destination tree, or neither a template nor a data file.

    """
    if not path.is_relative_to(config.source) or path.is_relative_to(config.dest):
        return None

    if is_template(path, config):
        return "template"
    if path.suffix == Path(config.data_file).suffix:
        return "data"
    return None


class ContentWatcher:
    """Watches the source tree and yields categorized change events.

    Uses ``watchfiles.awatch`` so the subscription lives on the running
    event loop.  Uncategorized changes are dropped here, before debouncing.

    """

    def __init__(self, config: SiteConfig) -> None:
        self._config = config

    async def changes(
        self, stop_event: asyncio.Event | None = None,
    ) -> AsyncIterator[ChangeEvent]:
        """Async iterator of ChangeEvent objects until *stop_event* is set."""
        async for raw_changes in awatch(
            self._config.source,
            stop_event=stop_event,
            debounce=self._config.debounce_ms,
            step=50,
        ):
            for change_type, path_str in sorted(raw_changes, key=lambda c: c[1]):
                event = self._to_event(change_type, Path(path_str))
                if event is not None:
                    yield event

    def _to_event(self, change_type: Change, path: Path) -> ChangeEvent | None:
        category = categorize_change(path, self._config)
        if category is None:
            return None
        kind = _CHANGE_KIND_MAP.get(change_type, "modified")
        return ChangeEvent(path=path, kind=kind, category=category)


class Debouncer:
    """Coalesces bursts of events per path before dispatching them.

    Each event for a path restarts that path's timer; when the timer fires,
    only the latest event for the path is dispatched.  Every dispatch runs as
    its own task, so a slow batch never blocks later events and is never
    cancelled by them.

    Args:
        delay: Quiet period in seconds before an event is dispatched.
        callback: Coroutine function invoked with the coalesced event.

    """

    def __init__(
        self,
        delay: float,
        callback: Callable[[ChangeEvent], Awaitable[object]],
    ) -> None:
        self._delay = delay
        self._callback = callback
        self._timers: dict[Path, asyncio.TimerHandle] = {}
        self._latest: dict[Path, ChangeEvent] = {}
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        """Number of paths waiting for their quiet period to end."""
        return len(self._timers)

    def push(self, event: ChangeEvent) -> None:
        """Schedule *event*, replacing any pending event for the same path."""
        loop = asyncio.get_running_loop()
        timer = self._timers.pop(event.path, None)
        if timer is not None:
            timer.cancel()
        self._latest[event.path] = event
        self._timers[event.path] = loop.call_later(self._delay, self._fire, event.path)

    def _fire(self, path: Path) -> None:
        self._timers.pop(path, None)
        event = self._latest.pop(path)
        task = asyncio.create_task(self._dispatch(event))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _dispatch(self, event: ChangeEvent) -> None:
        try:
            await self._callback(event)
        except Exception as exc:
            print(f"  Rebuild error ({event.path.name}): {exc}", file=sys.stderr)

    async def join(self) -> None:
        """Wait for every dispatched task to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def cancel(self) -> None:
        """Drop every pending (not yet dispatched) event."""
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()
        self._latest.clear()
