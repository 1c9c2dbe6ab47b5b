"""Renderer — template engine plus the post-processor pipeline.

Renders one page at a time:
    1. Jinja renders the page (by its source-relative name) against the
       current render context
    2. ``@svg(...)`` directives are expanded
    3. ``@text(...)`` directives are expanded
    4. In build mode, the HTML is beautified

The Jinja template cache is disabled, so a partial edited on disk is picked
up by the very next render without any invalidation step.
"""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING

from jinja2 import Environment, FileSystemLoader, TemplateError

from tessera._errors import FileSystemError, TemplateRenderError
from tessera.paths import template_name
from tessera.rendering.beautify import beautify as beautify_html
from tessera.rendering.directives import expand_svg, expand_text
from tessera.rendering.fetch import RemoteFetcher

if TYPE_CHECKING:
    from pathlib import Path

    from tessera._types import Fetcher, PostProcessor
    from tessera.config import SiteConfig
    from tessera.context import ContextStore


def create_environment(config: SiteConfig) -> Environment:
    """Create the Jinja environment rooted at the source tree."""
    return Environment(
        loader=FileSystemLoader(str(config.source)),
        autoescape=True,
        enable_async=True,
        cache_size=0,
        keep_trailing_newline=True,
    )


class Renderer:
    """Renders page templates to post-processed HTML strings.

    Args:
        config: Frozen site configuration.
        context: Store holding the current render context.  Read on every
            render, never mutated.
        fetch: Async ``url -> body`` used by directive expansion.  Defaults
            to a :class:`RemoteFetcher`.
        beautify: Apply HTML beautification as the last pass.

    """

    def __init__(
        self,
        config: SiteConfig,
        context: ContextStore,
        *,
        fetch: Fetcher | None = None,
        beautify: bool = False,
    ) -> None:
        self._config = config
        self._context = context
        self._env = create_environment(config)
        self._fetch: Fetcher = fetch or RemoteFetcher(timeout=config.fetch_timeout)
        self._beautify = beautify
        self._processors: tuple[PostProcessor, ...] = self._build_processors()

    @property
    def beautify(self) -> bool:
        return self._beautify

    def _build_processors(self) -> tuple[PostProcessor, ...]:
        processors: list[PostProcessor] = [
            partial(expand_svg, fetch=self._fetch),
            partial(expand_text, fetch=self._fetch),
        ]
        if self._beautify:
            indent = self._config.indent

            async def _beautify(text: str) -> str:
                return beautify_html(text, indent=indent)

            processors.append(_beautify)
        return tuple(processors)

    async def render(self, source_path: Path) -> str:
        """Render a page and run it through the post-processor pipeline.

        Raises:
            TemplateRenderError: Template syntax error or missing include.
            RemoteFetchError: A directive's URL could not be fetched.
            FileSystemError: The template could not be read.

        """
        name = template_name(source_path, self._config)
        context = self._context.data

        try:
            template = self._env.get_template(name)
            text = await template.render_async(context)
        except TemplateError as exc:
            msg = f"{name}: {exc}"
            raise TemplateRenderError(msg, path=source_path) from exc
        except OSError as exc:
            msg = f"Cannot read template {name}: {exc}"
            raise FileSystemError(msg, path=source_path) from exc

        for processor in self._processors:
            text = await processor(text)
        return text
