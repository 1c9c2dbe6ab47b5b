"""Path mapping between the source tree and the destination tree.

Pages map 1:1 onto ``.html`` files in the destination tree.  Partials (names
starting with ``config.partial_prefix``) are never mapped or listed as pages.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from tessera.config import SiteConfig


def is_template(path: Path, config: SiteConfig) -> bool:
    """True if *path* carries the template suffix (page or partial)."""
    return path.name.endswith(config.template_suffix)


def is_partial(path: Path, config: SiteConfig) -> bool:
    """True if *path* names a partial template."""
    return is_template(path, config) and path.name.startswith(config.partial_prefix)


def is_page(path: Path, config: SiteConfig) -> bool:
    return is_template(path, config) and not path.name.startswith(config.partial_prefix)


def to_destination(source_path: Path, config: SiteConfig) -> Path:
    """Map a page source path to its destination path.

    Replaces the source root with the destination root and the template
    suffix with the output suffix.  Assumes *source_path* is under the
    source root.
    """
    rel = source_path.relative_to(config.source)
    stem = rel.name[: -len(config.template_suffix)]
    return config.dest / rel.parent / f"{stem}{config.output_suffix}"


def template_name(source_path: Path, config: SiteConfig) -> str:
    """Engine-facing template name: POSIX path relative to the source root."""
    return source_path.relative_to(config.source).as_posix()


def partial_stem(path: Path, config: SiteConfig) -> str:
    """Bare name of a template (``_footer.jinja`` -> ``_footer``)."""
    return path.name[: -len(config.template_suffix)]


def all_templates(config: SiteConfig) -> tuple[Path, ...]:
    """Every template file under the source root, sorted.

    Files inside the destination directory are skipped when it is nested
    in the source tree.
    """
    if not config.source.is_dir():
        return ()
    found = []
    for path in config.source.rglob(f"*{config.template_suffix}"):
        if not path.is_file() or path.is_relative_to(config.dest):
            continue
        found.append(path)
    return tuple(sorted(found))


def all_pages(config: SiteConfig) -> tuple[Path, ...]:
    return tuple(p for p in all_templates(config) if not is_partial(p, config))


def all_partials(config: SiteConfig) -> tuple[Path, ...]:
    return tuple(p for p in all_templates(config) if is_partial(p, config))
