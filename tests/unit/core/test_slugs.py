"""Unit tests for slug normalization and relative paths."""

import pytest

from sitegraph.core.slugs import (
    is_tag_slug,
    normalize_slug,
    relative_path,
    slug_for_path,
    tag_name,
    tag_slug,
)


class TestNormalizeSlug:
    @pytest.mark.parametrize("raw, expected", [
        ("/Guides/Setup/", "guides/setup"),
        ("reference/index", "reference"),
        ("index", "/"),
        ("", "/"),
        ("/", "/"),
        ("a\\b\\c", "a/b/c"),
        ("docs/index/index", "docs"),
        ("reindex", "reindex"),
    ])
    def test_normalize(self, raw, expected):
        assert normalize_slug(raw) == expected

    @pytest.mark.parametrize("raw", [
        "/Guides/Setup/", "index", "a/index/", "//x//", "Tags/Python", "a\\Index", "",
    ])
    def test_idempotent(self, raw):
        once = normalize_slug(raw)
        assert normalize_slug(once) == once


class TestSlugForPath:
    def test_strips_suffix_and_index(self):
        assert slug_for_path("guides/setup.md") == "guides/setup"
        assert slug_for_path("guides/index.md") == "guides"
        assert slug_for_path("index.md") == "/"

    def test_strips_root_prefix(self):
        assert slug_for_path("docs/Guides/index.md", root="docs") == "guides"
        assert slug_for_path("docs/api.md", root="docs/") == "api"

    def test_root_prefix_must_match_whole_segment(self):
        assert slug_for_path("docsite/api.md", root="docs") == "docsite/api"


class TestTags:
    def test_tag_slug(self):
        assert tag_slug(" Python ") == "tags/python"
        assert is_tag_slug("tags/python")
        assert not is_tag_slug("guides/tags")

    def test_tag_name(self):
        assert tag_name("tags/python") == "python"
        assert tag_name("guides/setup") == "guides/setup"


class TestRelativePath:
    def test_two_levels_up(self):
        assert relative_path("a/b/c", "a/d") == "../../d/"

    def test_sibling(self):
        assert relative_path("guides/setup", "guides/install") == "../install/"

    def test_from_root(self):
        assert relative_path("/", "guides/setup") == "guides/setup/"

    def test_to_root(self):
        assert relative_path("guides/setup", "/") == "../../"

    def test_descendant(self):
        assert relative_path("a", "a/b") == "b/"

    def test_same_page(self):
        assert relative_path("a/b", "a/b") == "./"
