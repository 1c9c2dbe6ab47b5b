"""Shared test fixtures for tessera."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from tessera._errors import RemoteFetchError
from tessera.config import SiteConfig
from tessera.context import ContextStore


@pytest.fixture
def tmp_site(tmp_path: Path) -> Path:
    """Create a minimal source tree for testing.

    Returns the source directory.  Layout::

        src/
            data.json
            index.jinja        includes _footer
            about.jinja        includes _header, which includes _nav
            blog/post.jinja    includes _footer
            _footer.jinja
            _header.jinja
            _nav.jinja

    """
    src = tmp_path / "src"
    src.mkdir()
    (src / "data.json").write_text(json.dumps({"title": "Home", "year": 2026}))
    (src / "index.jinja").write_text(
        '<h1>{{ title }}</h1>\n{% include "_footer.jinja" %}\n'
    )
    (src / "about.jinja").write_text(
        '<h1>About</h1>\n{% include "_header.jinja" %}\n'
    )
    blog = src / "blog"
    blog.mkdir()
    (blog / "post.jinja").write_text(
        '<article>post</article>\n{% include "_footer.jinja" %}\n'
    )
    (src / "_footer.jinja").write_text("<footer>{{ year }}</footer>\n")
    (src / "_header.jinja").write_text('<nav>{% include "_nav.jinja" %}</nav>\n')
    (src / "_nav.jinja").write_text('<a href="/">{{ title }}</a>\n')
    return src


@pytest.fixture
def config(tmp_site: Path) -> SiteConfig:
    """A SiteConfig for tmp_site writing into a sibling dist/ directory."""
    return SiteConfig(source=tmp_site, dest=tmp_site.parent / "dist")


@pytest.fixture
def context(config: SiteConfig) -> ContextStore:
    """A ContextStore already loaded from tmp_site's data.json."""
    store = ContextStore(config.data_path)
    store.load()
    return store


class FakeFetcher:
    """In-memory async fetcher recording every requested URL."""

    def __init__(self, responses: dict[str, str] | None = None) -> None:
        self.responses = responses or {}
        self.calls: list[str] = []

    async def __call__(self, url: str) -> str:
        self.calls.append(url)
        if url not in self.responses:
            msg = f"Failed to fetch {url}: 404"
            raise RemoteFetchError(msg, path=url)
        return self.responses[url]


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher(
        {
            "https://cdn.test/icon.svg": '  <svg viewBox="0 0 1 1"><path/></svg>\n',
            "https://cdn.test/note.txt": "\nhello from afar\n",
        }
    )
