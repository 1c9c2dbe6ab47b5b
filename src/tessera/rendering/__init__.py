"""Rendering layer — Jinja templates plus post-render text passes.

Handles template rendering, remote-include directive expansion, and
build-mode HTML beautification.
"""

from tessera.rendering.beautify import beautify, condense_newlines
from tessera.rendering.directives import (
    Directive,
    expand_svg,
    expand_text,
    scan_directives,
)
from tessera.rendering.fetch import RemoteFetcher
from tessera.rendering.renderer import Renderer, create_environment

__all__ = [
    "Directive",
    "RemoteFetcher",
    "Renderer",
    "beautify",
    "condense_newlines",
    "create_environment",
    "expand_svg",
    "expand_text",
    "scan_directives",
]
