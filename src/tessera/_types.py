"""Shared type definitions for tessera."""

from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Literal, TypeAlias

# Mode of operation
TesseraMode: TypeAlias = Literal["dev", "build"]

# Kind of filesystem change
ChangeKind: TypeAlias = Literal["created", "modified", "deleted"]

# What kind of source file changed (determines the rebuild path)
ChangeCategory: TypeAlias = Literal["template", "data"]

# Shared render context loaded from the data file
Context: TypeAlias = Mapping[str, Any]

# Async url -> body capability used by directive expansion
Fetcher: TypeAlias = Callable[[str], Awaitable[str]]

# One pass of the post-render pipeline
PostProcessor: TypeAlias = Callable[[str], Awaitable[str]]
