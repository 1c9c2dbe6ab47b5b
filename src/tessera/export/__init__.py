"""Export layer — writing rendered pages to the destination tree."""

from tessera.export.writer import (
    BatchResult,
    BatchWriter,
    PageFailure,
    RemovedFile,
    WrittenPage,
    format_elapsed,
)

__all__ = [
    "BatchResult",
    "BatchWriter",
    "PageFailure",
    "RemovedFile",
    "WrittenPage",
    "format_elapsed",
]
