"""Shared fixtures for forkresolve tests."""

from __future__ import annotations

import pathlib
import textwrap

import pytest

from forkresolve.core.indexes import IndexCatalog, IndexUrl, PackageIndex

INDEX_A = "https://a.example/simple"
INDEX_B = "https://b.example/simple"


@pytest.fixture
def two_index_catalog() -> IndexCatalog:
    """Two indexes that both publish ``foo`` 1.0; only A publishes ``bar``."""
    a = PackageIndex(IndexUrl.parse(INDEX_A))
    a.add("foo", "1.0")
    a.add("bar", "1.0")
    a.add("bar", "2.0", ["foo>=1.0"])
    b = PackageIndex(IndexUrl.parse(INDEX_B))
    b.add("foo", "1.0")
    return IndexCatalog([a, b])


@pytest.fixture
def write_project(tmp_path: pathlib.Path):
    """Return a helper writing a dedented YAML project file into tmp_path."""

    def _write(content: str, name: str = "forkresolve.yaml") -> pathlib.Path:
        path = tmp_path / name
        path.write_text(textwrap.dedent(content))
        return path

    return _write


PLATFORM_SPLIT_PROJECT = f"""\
indexes:
  - url: {INDEX_A}
    packages:
      foo:
        "1.0": []
  - url: {INDEX_B}
    packages:
      foo:
        "1.0": []
requirements:
  - requirement: 'foo==1.0; sys_platform == "linux"'
    index: {INDEX_A}
  - requirement: 'foo==1.0; sys_platform == "win32"'
    index: {INDEX_B}
forks:
  - markers: sys_platform == "linux"
    environment: {{sys_platform: linux}}
  - markers: sys_platform == "win32"
    environment: {{sys_platform: win32}}
"""


@pytest.fixture
def platform_split_project(write_project) -> pathlib.Path:
    """``foo`` from index A on linux and from index B on win32, split by platform."""
    return write_project(PLATFORM_SPLIT_PROJECT)
