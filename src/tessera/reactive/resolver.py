"""Impact resolver — maps one change event to the pages it makes stale.

Classification:

=================  ==================  =====================================
File               Change              Plan
=================  ==================  =====================================
page               created / modified  render that page
partial            created / modified  render every dependent page
page               deleted             remove the page's destination file
partial            deleted             render dependents (configurable)
data file          any                 reload context, render every page
anything else      any                 nothing
=================  ==================  =====================================

Dependents are found by textual inclusion, not by parsing include tags: a
page depends on a partial if the page's raw text contains the partial's
bare name (``_footer`` for ``_footer.jinja``), either directly or through a
chain of partials that do.  The scan may over-select (the name appears in a
comment) but never under-selects as long as includes name partials
literally.  Every scan reads the current tree; nothing is cached between
events.
"""

from __future__ import annotations

import asyncio
import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING

from tessera.paths import (
    all_pages,
    all_templates,
    is_partial,
    is_template,
    partial_stem,
    to_destination,
)

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from tessera.config import SiteConfig
    from tessera.content.watcher import ChangeEvent


@dataclass(frozen=True, slots=True)
class RebuildPlan:
    """What one change event requires.

    Attributes:
        render: Impact set — page sources to re-render, in tree order.
        remove: Destination files to delete.
        reload_context: Reload the data file before rendering.

    """

    render: tuple[Path, ...] = ()
    remove: tuple[Path, ...] = ()
    reload_context: bool = False

    @property
    def is_empty(self) -> bool:
        return not (self.render or self.remove or self.reload_context)


def find_dependents(
    stem: str,
    sources: Mapping[Path, str],
    config: SiteConfig,
) -> tuple[Path, ...]:
    """Pages in *sources* that include the partial named *stem*, transitively.

    Args:
        stem: Bare name of the changed partial.
        sources: Raw text of every template in the tree, keyed by path, in
            tree order.
        config: Site configuration (partial marker, suffix).

    Returns:
        Page paths in the iteration order of *sources*.

    """
    partials = {
        path: text for path, text in sources.items() if is_partial(path, config)
    }

    # Grow the set of partial names whose change reaches a page, until
    # no partial mentions a name already in the set.
    closure = {stem}
    frontier = [stem]
    while frontier:
        name = frontier.pop()
        for path, text in partials.items():
            other = partial_stem(path, config)
            if other not in closure and name in text:
                closure.add(other)
                frontier.append(other)

    return tuple(
        path
        for path, text in sources.items()
        if not is_partial(path, config) and any(name in text for name in closure)
    )


class ImpactResolver:
    """Classifies change events and computes their impact sets.

    Stateless across events: every call reads the source tree as it is now.

    Args:
        config: Frozen site configuration.

    """

    def __init__(self, config: SiteConfig) -> None:
        self._config = config

    async def resolve(self, event: ChangeEvent) -> RebuildPlan:
        """Compute the rebuild plan for a single change event."""
        config = self._config
        path = event.path

        if event.category == "data":
            pages = await asyncio.to_thread(all_pages, config)
            return RebuildPlan(render=pages, reload_context=True)

        if event.category != "template" or not is_template(path, config):
            return RebuildPlan()

        partial = is_partial(path, config)

        if event.kind == "deleted":
            if not partial:
                return RebuildPlan(remove=(to_destination(path, config),))
            if not config.rerender_on_partial_delete:
                return RebuildPlan()
            return RebuildPlan(render=await self.dependents(path))

        if partial:
            return RebuildPlan(render=await self.dependents(path))
        return RebuildPlan(render=(path,))

    async def dependents(self, partial: Path) -> tuple[Path, ...]:
        """Every page that includes *partial*, directly or via other partials."""
        templates = await asyncio.to_thread(all_templates, self._config)
        sources = await self._read_all(templates)
        return find_dependents(partial_stem(partial, self._config), sources, self._config)

    async def _read_all(self, paths: tuple[Path, ...]) -> dict[Path, str]:
        """Read every template concurrently, skipping unreadable files."""
        texts = await asyncio.gather(
            *(asyncio.to_thread(p.read_text, encoding="utf-8") for p in paths),
            return_exceptions=True,
        )
        sources: dict[Path, str] = {}
        for path, text in zip(paths, texts, strict=True):
            if isinstance(text, str):
                sources[path] = text
            elif isinstance(text, (OSError, UnicodeDecodeError)):
                print(f"  Read error: {path.name}: {text}", file=sys.stderr)
            else:
                raise text
        return sources
