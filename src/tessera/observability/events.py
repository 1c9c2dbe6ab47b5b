"""Event model for build and rebuild observability.

All events are frozen dataclasses with:
- ``timestamp_ns``: Monotonic nanosecond timestamp
- Descriptive fields for the specific event type

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass
from typing import Literal, TypeAlias


# ---------------------------------------------------------------------------
# Batch writer events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PageRendered:
    """A page was rendered and written to the destination tree.

    Attributes:
        source: Page source path.
        target: Destination path written.
        size_bytes: Size of the written file.
        duration_ms: Render + write time in milliseconds.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    source: str
    target: str
    size_bytes: int
    duration_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class PageRemoved:
    """A destination file was removed (or was already absent).

    Attributes:
        path: Destination path.
        existed: False if there was nothing to delete.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    existed: bool
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class PageFailed:
    """A page could not be rendered, written, or removed.

    Attributes:
        path: Source (or destination, for removals) path.
        error_type: Name of the error class.
        message: Error message.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    error_type: str
    message: str
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Rebuild pipeline events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ContextReloaded:
    """The data file was reloaded.

    Attributes:
        path: Data file path.
        ok: False if the reload failed and the previous context was kept.
        keys: Number of top-level keys in the new context (0 on failure).
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    ok: bool
    keys: int
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class ChangeHandled:
    """A watch event was resolved and dispatched.

    Attributes:
        trigger_path: The changed source file.
        kind: Type of filesystem change.
        category: ``"template"`` or ``"data"``.
        pages_rendered: Size of the impact set.
        files_removed: Number of destination files removed.
        duration_ms: Time from dispatch to batch completion.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    trigger_path: str
    kind: Literal["created", "modified", "deleted"]
    category: Literal["template", "data"]
    pages_rendered: int
    files_removed: int
    duration_ms: float
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

StackEvent: TypeAlias = (
    PageRendered
    | PageRemoved
    | PageFailed
    | ContextReloaded
    | ChangeHandled
)


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
