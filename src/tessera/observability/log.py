"""Event log — queryable, thread-safe event store.

Stores a bounded ring buffer of ``StackEvent`` objects for inspection, plus
running per-type totals that survive eviction from the buffer.  The build
and watch summaries are computed from these totals.

Thread Safety:
    All methods are protected by a ``threading.Lock``.  Writes happen from
    the event loop and from ``asyncio.to_thread`` workers.

"""

import threading
from collections import Counter, deque
from typing import Any

from tessera.observability.events import StackEvent


class EventLog:
    """Bounded event store with query support.

    Events are stored in a ring buffer (deque with maxlen).  When the
    buffer is full, the oldest events are discarded automatically; the
    per-type totals keep counting.

    Args:
        max_events: Maximum number of events to retain.

    """

    __slots__ = ("_events", "_lock", "_max_events", "_totals")

    def __init__(self, max_events: int = 10_000) -> None:
        self._max_events = max_events
        self._events: deque[StackEvent] = deque(maxlen=max_events)
        self._totals: Counter[str] = Counter()
        self._lock = threading.Lock()

    def append(self, event: StackEvent) -> None:
        """Record an event in the log."""
        with self._lock:
            self._events.append(event)
            self._totals[type(event).__name__] += 1

    def query(
        self,
        *,
        event_type: type | None = None,
        since_ns: int = 0,
        limit: int = 100,
    ) -> list[StackEvent]:
        """Query retained events, most recent first.

        Args:
            event_type: Only return events of this type.
            since_ns: Only return events after this timestamp (nanoseconds).
            limit: Maximum number of events to return.

        """
        with self._lock:
            results: list[StackEvent] = []
            for event in reversed(self._events):
                if len(results) >= limit:
                    break
                if event_type is not None and not isinstance(event, event_type):
                    continue
                if since_ns and event.timestamp_ns < since_ns:
                    continue
                results.append(event)
            return results

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def stats(self) -> dict[str, Any]:
        """Return the retained count and all-time totals per event type."""
        with self._lock:
            return {
                "retained": len(self._events),
                "max_events": self._max_events,
                "by_type": dict(self._totals),
            }
