"""Tessera — an incremental static-site builder for Jinja templates.

Renders every page template in a source tree to HTML in a destination
tree, and keeps that tree current while you edit.  Editing a partial
re-renders exactly the pages that include it; editing ``data.json``
re-renders everything.

Quick start::

    import tessera

    tessera.build("src/", "dist/")     # Render every page, beautified
    tessera.dev("src/", "dist/")       # Watch and re-render on change

Source tree conventions::

    src/
        data.json           render context shared by every page
        index.jinja         page    -> dist/index.html
        blog/post.jinja     page    -> dist/blog/post.html
        _footer.jinja       partial (included, never written)

"""

__version__ = "0.1.0"
__all__ = [
    "SiteConfig",
    "__version__",
    "build",
    "dev",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import tessera`` fast while providing a clean top-level API.
    """
    if name == "SiteConfig":
        from tessera.config import SiteConfig

        return SiteConfig

    if name == "dev":
        from tessera.app import dev

        return dev

    if name == "build":
        from tessera.app import build

        return build

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
