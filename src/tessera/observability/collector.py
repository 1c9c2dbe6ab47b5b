"""Build collector — records writer and pipeline events into an EventLog.

Thread Safety:
    The collector delegates to ``EventLog`` which is internally locked.

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from tessera.observability.events import (
    ChangeHandled,
    ContextReloaded,
    PageFailed,
    PageRemoved,
    PageRendered,
    now_ns,
)
from tessera.observability.log import EventLog

if TYPE_CHECKING:
    from tessera._types import ChangeCategory, ChangeKind


class BuildCollector:
    """Event collector for batch writes and watch-driven rebuilds.

    Args:
        log: The EventLog to store events in.

    """

    __slots__ = ("_log",)

    def __init__(self, log: EventLog | None = None) -> None:
        self._log = log if log is not None else EventLog()

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    # ----- Batch writer -----

    def record_render(
        self,
        source: str,
        target: str,
        *,
        size_bytes: int = 0,
        duration_ms: float = 0.0,
    ) -> None:
        self._log.append(
            PageRendered(
                source=source,
                target=target,
                size_bytes=size_bytes,
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )

    def record_remove(self, path: str, *, existed: bool = True) -> None:
        self._log.append(PageRemoved(path=path, existed=existed, timestamp_ns=now_ns()))

    def record_failure(self, path: str, error: BaseException) -> None:
        self._log.append(
            PageFailed(
                path=path,
                error_type=type(error).__name__,
                message=str(error),
                timestamp_ns=now_ns(),
            )
        )

    # ----- Rebuild pipeline -----

    def record_reload(self, path: str, *, ok: bool, keys: int = 0) -> None:
        self._log.append(
            ContextReloaded(path=path, ok=ok, keys=keys, timestamp_ns=now_ns())
        )

    def record_change(
        self,
        trigger_path: str,
        *,
        kind: ChangeKind,
        category: ChangeCategory,
        pages_rendered: int = 0,
        files_removed: int = 0,
        duration_ms: float = 0.0,
    ) -> None:
        """Record a fully handled watch event."""
        self._log.append(
            ChangeHandled(
                trigger_path=trigger_path,
                kind=kind,
                category=category,
                pages_rendered=pages_rendered,
                files_removed=files_removed,
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )
