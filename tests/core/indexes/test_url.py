"""Tests for index identity normalization and ordering."""

from __future__ import annotations

import pytest

from forkresolve.core.indexes import IndexUrl
from forkresolve.exceptions import ConfigError, InvalidIndexUrl


class TestNormalization:
    def test_trailing_slash_dropped(self) -> None:
        assert IndexUrl.parse("https://pypi.org/simple/") == IndexUrl.parse("https://pypi.org/simple")

    def test_scheme_and_host_lowercased(self) -> None:
        assert str(IndexUrl.parse("HTTPS://PyPI.org/simple")) == "https://pypi.org/simple"

    def test_path_case_preserved(self) -> None:
        assert str(IndexUrl.parse("https://a.example/Simple")) == "https://a.example/Simple"

    def test_whitespace_stripped(self) -> None:
        assert str(IndexUrl.parse("  https://a.example  ")) == "https://a.example"

    def test_file_url_accepted(self) -> None:
        assert str(IndexUrl.parse("file:///srv/index/")) == "file:///srv/index"

    def test_different_paths_are_different_indexes(self) -> None:
        assert IndexUrl.parse("https://a.example/one") != IndexUrl.parse("https://a.example/two")


class TestValidation:
    @pytest.mark.parametrize("raw", ["", "   ", "ftp://a.example", "a.example/simple", "https:///path"])
    def test_invalid_urls_rejected(self, raw: str) -> None:
        with pytest.raises(InvalidIndexUrl):
            IndexUrl.parse(raw)

    def test_invalid_url_is_config_and_value_error(self) -> None:
        with pytest.raises(ConfigError):
            IndexUrl.parse("ftp://a.example")
        with pytest.raises(ValueError):
            IndexUrl.parse("ftp://a.example")


class TestOrdering:
    def test_sort_matches_string_sort(self) -> None:
        urls = [IndexUrl.parse(u) for u in ["https://c.example", "https://a.example", "https://b.example"]]
        assert [str(u) for u in sorted(urls)] == sorted(str(u) for u in urls)

    def test_of_accepts_both_forms(self) -> None:
        url = IndexUrl.parse("https://a.example")
        assert IndexUrl.of(url) is url
        assert IndexUrl.of("https://a.example/") == url
