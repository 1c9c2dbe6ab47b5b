"""Remote-include directives — ``@svg(...)`` and ``@text(...)``.

A textual pre-pass over rendered HTML, deliberately not a parser::

    @svg('https://cdn.example.com/icon.svg')
    @svg("https://cdn.example.com/icon.svg", 'class="icon" width="16"')
    @text('https://example.com/snippet.txt')

Each directive is replaced by the fetched body (whitespace-stripped).  For
``@svg`` the optional second argument is injected into the root ``<svg``
tag.  Directives are substituted in document order, each at its first
remaining occurrence, so a directive repeated twice expands twice.
"""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tessera._types import Fetcher


# A quoted argument never contains its own quote character.
_SVG_RE = re.compile(
    r"""@svg\(\s*(['"])(?P<url>(?:(?!\1).)+)\1"""
    r"""\s*(?:,\s*(['"])(?P<attrs>(?:(?!\3).)*)\3\s*)?\)"""
)
_TEXT_RE = re.compile(r"""@text\(\s*(['"])(?P<url>(?:(?!\1).)+)\1\s*\)""")

_PATTERNS: dict[str, re.Pattern[str]] = {
    "svg": _SVG_RE,
    "text": _TEXT_RE,
}


@dataclass(frozen=True, slots=True)
class Directive:
    """One directive occurrence found in a text.

    Attributes:
        tag: ``"svg"`` or ``"text"``.
        span: (start, end) offsets of the directive in the scanned text.
        raw: The literal directive text, used as the substitution key.
        url: URL to fetch.
        attrs: Attribute string to inject into ``<svg`` (svg only).

    """

    tag: str
    span: tuple[int, int]
    raw: str
    url: str
    attrs: str | None = None


def scan_directives(text: str, tag: str) -> list[Directive]:
    """Find every ``@<tag>(...)`` directive in *text*, in document order.

    Raises:
        ValueError: If *tag* is not a known directive.

    """
    pattern = _PATTERNS.get(tag)
    if pattern is None:
        msg = f"Unknown directive tag {tag!r}"
        raise ValueError(msg)

    found: list[Directive] = []
    for match in pattern.finditer(text):
        attrs = match.groupdict().get("attrs")
        found.append(
            Directive(
                tag=tag,
                span=match.span(),
                raw=match.group(0),
                url=match.group("url").strip(),
                attrs=attrs or None,
            )
        )
    return found


async def _fetch_all(urls: list[str], fetch: Fetcher) -> dict[str, str]:
    """Fetch each distinct URL once, concurrently."""
    unique = list(dict.fromkeys(urls))
    bodies = await asyncio.gather(*(fetch(url) for url in unique))
    return {url: body.strip() for url, body in zip(unique, bodies, strict=True)}


def _inject_svg_attrs(svg: str, attrs: str | None) -> str:
    if not attrs:
        return svg
    return svg.replace("<svg", f"<svg {attrs}", 1)


async def expand_svg(text: str, fetch: Fetcher) -> str:
    """Replace every ``@svg(...)`` directive with the fetched SVG markup.

    Raises:
        RemoteFetchError: If any fetch fails (propagated from *fetch*).

    """
    directives = scan_directives(text, "svg")
    if not directives:
        return text

    bodies = await _fetch_all([d.url for d in directives], fetch)
    for directive in directives:
        replacement = _inject_svg_attrs(bodies[directive.url], directive.attrs)
        text = text.replace(directive.raw, replacement, 1)
    return text


async def expand_text(text: str, fetch: Fetcher) -> str:
    """Replace every ``@text(...)`` directive with the fetched raw text."""
    directives = scan_directives(text, "text")
    if not directives:
        return text

    bodies = await _fetch_all([d.url for d in directives], fetch)
    for directive in directives:
        text = text.replace(directive.raw, bodies[directive.url], 1)
    return text
