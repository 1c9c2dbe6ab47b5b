"""Tests for tessera.observability — build and rebuild events."""

import threading

import pytest

from tessera.observability.collector import BuildCollector
from tessera.observability.events import (
    ChangeHandled,
    ContextReloaded,
    PageFailed,
    PageRemoved,
    PageRendered,
    now_ns,
)
from tessera.observability.log import EventLog


def _rendered(source: str, target: str = "/dist/x.html", ts: int | None = None) -> PageRendered:
    return PageRendered(
        source=source, target=target, size_bytes=10, duration_ms=0.1,
        timestamp_ns=now_ns() if ts is None else ts,
    )


# ---------------------------------------------------------------------------
# EventLog
# ---------------------------------------------------------------------------


class TestEventLog:
    """Tests for the event log store."""

    def test_append_and_len(self) -> None:
        log = EventLog()
        assert len(log) == 0
        log.append(_rendered("/src/a.jinja"))
        assert len(log) == 1

    def test_max_events_enforced(self) -> None:
        log = EventLog(max_events=5)
        for i in range(10):
            log.append(_rendered(f"/src/{i}.jinja"))
        assert len(log) == 5

    def test_query_by_type(self) -> None:
        log = EventLog()
        log.append(_rendered("/src/a.jinja"))
        log.append(PageRemoved(path="/dist/b.html", existed=True, timestamp_ns=now_ns()))

        [event] = log.query(event_type=PageRemoved)
        assert event.path == "/dist/b.html"

    def test_query_most_recent_first(self) -> None:
        log = EventLog()
        log.append(_rendered("/src/first.jinja"))
        log.append(_rendered("/src/second.jinja"))
        assert [e.source for e in log.query()] == ["/src/second.jinja", "/src/first.jinja"]

    def test_query_since(self) -> None:
        log = EventLog()
        log.append(_rendered("/src/old.jinja", ts=100))
        log.append(_rendered("/src/new.jinja", ts=200))
        [event] = log.query(since_ns=150)
        assert event.source == "/src/new.jinja"

    def test_query_limit(self) -> None:
        log = EventLog()
        for i in range(10):
            log.append(_rendered(f"/src/{i}.jinja"))
        assert len(log.query(limit=4)) == 4

    def test_stats(self) -> None:
        log = EventLog(max_events=50)
        log.append(_rendered("/src/a.jinja"))
        log.append(PageFailed(
            path="/src/b.jinja", error_type="TemplateRenderError",
            message="boom", timestamp_ns=now_ns(),
        ))

        stats = log.stats()
        assert stats["retained"] == 2
        assert stats["max_events"] == 50
        assert stats["by_type"] == {"PageRendered": 1, "PageFailed": 1}

    def test_totals_survive_eviction(self) -> None:
        log = EventLog(max_events=3)
        for i in range(8):
            log.append(_rendered(f"/src/{i}.jinja"))

        stats = log.stats()
        assert stats["retained"] == 3
        assert stats["by_type"] == {"PageRendered": 8}

    def test_thread_safety(self) -> None:
        """Concurrent appends should not lose events."""
        log = EventLog(max_events=50_000)
        errors: list[Exception] = []

        def worker(start: int) -> None:
            try:
                for i in range(1000):
                    log.append(_rendered(f"/src/{start}_{i}.jinja"))
            except Exception as exc:
                errors.append(exc)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert not errors
        assert len(log) == 10_000


# ---------------------------------------------------------------------------
# BuildCollector
# ---------------------------------------------------------------------------


class TestBuildCollector:
    """Tests for the build collector."""

    def test_record_render(self) -> None:
        collector = BuildCollector()
        collector.record_render("/src/a.jinja", "/dist/a.html", size_bytes=42, duration_ms=3.5)

        [event] = collector.log.query(event_type=PageRendered)
        assert event.target == "/dist/a.html"
        assert event.size_bytes == 42
        assert event.duration_ms == 3.5

    def test_record_remove(self) -> None:
        collector = BuildCollector()
        collector.record_remove("/dist/a.html", existed=False)

        [event] = collector.log.query(event_type=PageRemoved)
        assert event.existed is False

    def test_record_failure(self) -> None:
        collector = BuildCollector()
        collector.record_failure("/src/a.jinja", ValueError("bad value"))

        [event] = collector.log.query(event_type=PageFailed)
        assert event.error_type == "ValueError"
        assert event.message == "bad value"

    def test_record_reload(self) -> None:
        collector = BuildCollector()
        collector.record_reload("/src/data.json", ok=True, keys=3)

        [event] = collector.log.query(event_type=ContextReloaded)
        assert event.ok is True
        assert event.keys == 3

    def test_record_change(self) -> None:
        collector = BuildCollector()
        collector.record_change(
            "/src/_footer.jinja",
            kind="modified",
            category="template",
            pages_rendered=4,
            duration_ms=12.0,
        )

        [event] = collector.log.query(event_type=ChangeHandled)
        assert event.pages_rendered == 4
        assert event.files_removed == 0

    def test_collector_with_custom_log(self) -> None:
        log = EventLog(max_events=50)
        collector = BuildCollector(log)

        collector.record_remove("/dist/a.html")
        assert len(log) == 1
        assert collector.log is log


# ---------------------------------------------------------------------------
# Event dataclasses
# ---------------------------------------------------------------------------


class TestEventDataclasses:
    """Tests for event immutability and structure."""

    def test_events_frozen(self) -> None:
        event = _rendered("/src/a.jinja")
        with pytest.raises(AttributeError):
            event.source = "/src/b.jinja"  # type: ignore[misc]

    def test_now_ns_monotonic(self) -> None:
        t1 = now_ns()
        t2 = now_ns()
        assert t2 >= t1
