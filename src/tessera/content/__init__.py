"""Content layer — watching the source tree for changes."""

from tessera.content.watcher import (
    ChangeEvent,
    ContentWatcher,
    Debouncer,
    categorize_change,
)

__all__ = [
    "ChangeEvent",
    "ContentWatcher",
    "Debouncer",
    "categorize_change",
]
