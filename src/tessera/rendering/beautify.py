"""HTML beautification for build output.

Collapses runs of blank lines, then re-indents the block structure of the
document one level per nesting depth.  Inline (phrasing) elements and the
text around them stay on their parent's line, so the rendered text is
unchanged.  ``<pre>``, ``<code>``, ``<textarea>``, ``<script>`` and
``<style>`` are copied through verbatim.  Dev mode never calls this; output
there stays exactly as rendered.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from bs4 import BeautifulSoup, Comment, Declaration, Doctype, NavigableString, Tag
from bs4.dammit import EntitySubstitution
from bs4.formatter import HTMLFormatter

if TYPE_CHECKING:
    from bs4 import PageElement

_BLANK_RUN_RE = re.compile(r"\n[ \t]*(?:\n[ \t]*)+")
_WHITESPACE_RE = re.compile(r"\s+")

INLINE_TAGS = frozenset({
    "a", "abbr", "b", "bdi", "bdo", "br", "button", "cite", "code", "data",
    "dfn", "em", "i", "img", "input", "kbd", "label", "mark", "math", "q",
    "s", "samp", "select", "small", "span", "strong", "sub", "sup", "svg",
    "textarea", "time", "u", "var", "wbr",
})

PRESERVED_TAGS = frozenset({"pre", "code", "textarea", "script", "style"})

_FORMATTER = HTMLFormatter(entity_substitution=EntitySubstitution.substitute_xml)


def condense_newlines(text: str) -> str:
    """Collapse consecutive blank lines into a single newline."""
    return _BLANK_RUN_RE.sub("\n", text)


def beautify(text: str, indent: str = "\t") -> str:
    """Reformat *text* as indented HTML without changing its rendered text."""
    soup = BeautifulSoup(condense_newlines(text), "html.parser")
    lines: list[str] = []
    _emit_children(soup, 0, indent, lines)
    return "\n".join(lines) + "\n" if lines else ""


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def _is_block(node: PageElement) -> bool:
    if isinstance(node, (Doctype, Declaration)):
        return True
    return isinstance(node, Tag) and node.name not in INLINE_TAGS


def _inline_text(node: PageElement) -> str:
    """Serialize a node that stays on its parent's line."""
    if isinstance(node, Comment):
        return node.output_ready(_FORMATTER)
    if isinstance(node, NavigableString):
        return _WHITESPACE_RE.sub(" ", node.output_ready(_FORMATTER))
    return node.decode(formatter=_FORMATTER)


def _open_tag(tag: Tag) -> str:
    parts = [tag.name]
    for key, value in _FORMATTER.attributes(tag):
        if value is None:
            parts.append(key)
            continue
        if isinstance(value, list):
            value = " ".join(value)
        quoted = EntitySubstitution.quoted_attribute_value(
            _FORMATTER.attribute_value(str(value))
        )
        parts.append(f"{key}={quoted}")
    return f"<{' '.join(parts)}>"


def _emit_children(parent: Tag, depth: int, indent: str, lines: list[str]) -> None:
    pad = indent * depth
    run: list[str] = []

    def flush() -> None:
        line = "".join(run).strip()
        run.clear()
        if line:
            lines.append(pad + line)

    for child in parent.children:
        if not _is_block(child):
            run.append(_inline_text(child))
            continue
        flush()
        _emit_block(child, depth, indent, lines)
    flush()


def _emit_block(node: PageElement, depth: int, indent: str, lines: list[str]) -> None:
    pad = indent * depth
    if not isinstance(node, Tag):
        lines.append(pad + node.output_ready(_FORMATTER).strip())
        return

    if node.name in PRESERVED_TAGS or node.is_empty_element:
        lines.append(pad + node.decode(formatter=_FORMATTER))
        return

    close = f"</{node.name}>"
    if not any(_is_block(child) for child in node.children):
        body = "".join(_inline_text(child) for child in node.children).strip()
        lines.append(f"{pad}{_open_tag(node)}{body}{close}")
        return

    lines.append(pad + _open_tag(node))
    _emit_children(node, depth + 1, indent, lines)
    lines.append(pad + close)
