"""Tests for tessera.paths — source/destination mapping and tree listing."""

from __future__ import annotations

from pathlib import Path

import pytest

from tessera.config import SiteConfig
from tessera.paths import (
    all_pages,
    all_partials,
    all_templates,
    is_page,
    is_partial,
    is_template,
    partial_stem,
    template_name,
    to_destination,
)


@pytest.fixture
def bare_config(tmp_path: Path) -> SiteConfig:
    return SiteConfig(source=tmp_path / "src", dest=tmp_path / "dist")


class TestToDestination:
    """to_destination — source root and suffix substitution."""

    def test_top_level_page(self, bare_config: SiteConfig) -> None:
        source = bare_config.source / "index.jinja"
        assert to_destination(source, bare_config) == bare_config.dest / "index.html"

    def test_nested_page_keeps_directories(self, bare_config: SiteConfig) -> None:
        source = bare_config.source / "blog" / "2026" / "post.jinja"
        expected = bare_config.dest / "blog" / "2026" / "post.html"
        assert to_destination(source, bare_config) == expected

    def test_only_trailing_suffix_replaced(self, bare_config: SiteConfig) -> None:
        source = bare_config.source / "notes.jinja.jinja"
        assert to_destination(source, bare_config) == bare_config.dest / "notes.jinja.html"

    def test_dotted_name(self, bare_config: SiteConfig) -> None:
        source = bare_config.source / "v1.2.jinja"
        assert to_destination(source, bare_config) == bare_config.dest / "v1.2.html"

    def test_custom_suffixes(self, tmp_path: Path) -> None:
        config = SiteConfig(
            source=tmp_path / "src", dest=tmp_path / "out",
            template_suffix=".edge", output_suffix=".htm",
        )
        assert to_destination(config.source / "a.edge", config) == config.dest / "a.htm"

    def test_injective_across_pages(self, config: SiteConfig) -> None:
        pages = all_pages(config)
        destinations = {to_destination(p, config) for p in pages}
        assert len(destinations) == len(pages)

    def test_destination_under_dest_root(self, config: SiteConfig) -> None:
        for page in all_pages(config):
            assert to_destination(page, config).is_relative_to(config.dest)


class TestClassification:
    def test_partial(self, bare_config: SiteConfig) -> None:
        assert is_partial(Path("/x/_footer.jinja"), bare_config)
        assert not is_page(Path("/x/_footer.jinja"), bare_config)

    def test_page(self, bare_config: SiteConfig) -> None:
        assert is_page(Path("/x/index.jinja"), bare_config)
        assert not is_partial(Path("/x/index.jinja"), bare_config)

    def test_underscore_in_directory_does_not_make_partial(
        self, bare_config: SiteConfig,
    ) -> None:
        assert is_page(Path("/x/_drafts/index.jinja"), bare_config)

    def test_non_template(self, bare_config: SiteConfig) -> None:
        assert not is_template(Path("/x/_notes.txt"), bare_config)
        assert not is_partial(Path("/x/_notes.txt"), bare_config)
        assert not is_page(Path("/x/data.json"), bare_config)

    def test_partial_stem(self, bare_config: SiteConfig) -> None:
        assert partial_stem(Path("/x/_footer.jinja"), bare_config) == "_footer"

    def test_template_name_is_posix_relative(self, bare_config: SiteConfig) -> None:
        source = bare_config.source / "blog" / "post.jinja"
        assert template_name(source, bare_config) == "blog/post.jinja"


class TestListing:
    def test_all_pages_sorted_without_partials(self, config: SiteConfig) -> None:
        names = [p.relative_to(config.source).as_posix() for p in all_pages(config)]
        assert names == ["about.jinja", "blog/post.jinja", "index.jinja"]

    def test_all_partials(self, config: SiteConfig) -> None:
        names = sorted(p.name for p in all_partials(config))
        assert names == ["_footer.jinja", "_header.jinja", "_nav.jinja"]

    def test_all_templates_is_union(self, config: SiteConfig) -> None:
        assert set(all_templates(config)) == set(all_pages(config)) | set(all_partials(config))

    def test_non_templates_ignored(self, config: SiteConfig) -> None:
        (config.source / "readme.txt").write_text("hi")
        assert all(p.suffix == ".jinja" for p in all_templates(config))

    def test_missing_source_is_empty(self, bare_config: SiteConfig) -> None:
        assert all_pages(bare_config) == ()

    def test_nested_dest_skipped(self, tmp_site: Path) -> None:
        config = SiteConfig(source=tmp_site, dest=tmp_site / "public")
        (config.dest).mkdir()
        (config.dest / "stray.jinja").write_text("x")
        assert config.dest / "stray.jinja" not in all_pages(config)
