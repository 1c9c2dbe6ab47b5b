"""Build observability — structured events for renders, removals, and reloads.

All events are frozen dataclasses with nanosecond timestamps, safe to
record from the event loop and from worker threads alike.

Quick Start:
    >>> from tessera.observability import BuildCollector, EventLog
    >>> log = EventLog()
    >>> collector = BuildCollector(log)
    >>> # Pass collector to BatchWriter / RebuildPipeline

"""

from tessera.observability.collector import BuildCollector
from tessera.observability.events import (
    ChangeHandled,
    ContextReloaded,
    PageFailed,
    PageRemoved,
    PageRendered,
    StackEvent,
    now_ns,
)
from tessera.observability.log import EventLog

__all__ = [
    "BuildCollector",
    "ChangeHandled",
    "ContextReloaded",
    "EventLog",
    "PageFailed",
    "PageRemoved",
    "PageRendered",
    "StackEvent",
    "now_ns",
]
