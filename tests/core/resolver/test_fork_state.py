"""Tests for per-fork resolution state: applicability and index assignment."""

from __future__ import annotations

import pytest
from packaging.markers import Marker
from packaging.requirements import Requirement

from forkresolve.core.indexes import IndexCatalog, IndexUrl
from forkresolve.core.names import PackageName
from forkresolve.core.resolver import (
    Fork,
    ForkState,
    RootRequirement,
    SpecificEnvironment,
    Universal,
)
from forkresolve.exceptions import (
    ConflictingIndexesFork,
    ConflictingIndexesUniversal,
    UnknownIndexError,
)

FOO = PackageName.parse("foo")
BAR = PackageName.parse("bar")
A = IndexUrl.parse("https://a.example/simple")
B = IndexUrl.parse("https://b.example/simple")
LINUX_ONLY = Requirement('foo; sys_platform == "linux"')
TEST_EXTRA = Requirement('pytest; extra == "test"')
LINUX = Fork(Marker('sys_platform == "linux"'))


class TestApplicability:
    def test_universal_ignores_environment_markers(self) -> None:
        state = ForkState.root(Universal(), environment={"sys_platform": "win32"})
        assert state.environment is None
        assert state.applies(LINUX_ONLY)
        assert state.applies(Requirement("foo"))

    def test_specific_environment_evaluates_markers(self) -> None:
        state = ForkState.root(SpecificEnvironment({"sys_platform": "win32"}))
        assert not state.applies(LINUX_ONLY)
        assert state.applies(Requirement("foo"))

    def test_fork_uses_representative_environment(self) -> None:
        assert ForkState.root(LINUX, {"sys_platform": "linux"}).applies(LINUX_ONLY)
        assert not ForkState.root(LINUX, {"sys_platform": "darwin"}).applies(LINUX_ONLY)

    def test_fork_requires_environment(self) -> None:
        with pytest.raises(ValueError, match="representative environment"):
            ForkState.root(LINUX)

    def test_unknown_markers_rejected(self) -> None:
        with pytest.raises(TypeError):
            ForkState.root(object())  # type: ignore[arg-type]


class TestExtraMarkers:
    """Extras are never requested, so extra-guarded requirements never apply."""

    @pytest.mark.parametrize(
        "state",
        [
            ForkState.root(Universal()),
            ForkState.root(SpecificEnvironment({"sys_platform": "linux"})),
            ForkState.root(LINUX, {"sys_platform": "linux"}),
        ],
        ids=["universal", "environment", "fork"],
    )
    def test_extra_guarded_requirement_skipped(self, state: ForkState) -> None:
        assert not state.applies(TEST_EXTRA)

    def test_universal_extra_combined_with_platform(self) -> None:
        state = ForkState.root(Universal())
        assert not state.applies(Requirement('pytest; sys_platform == "linux" and extra == "test"'))
        assert state.applies(Requirement('pytest; sys_platform == "linux" or extra == "test"'))
        assert state.applies(Requirement('pytest; extra != "test"'))

    def test_universal_parenthesized_extras(self) -> None:
        state = ForkState.root(Universal())
        requirement = Requirement(
            'pytest; (extra == "test" or extra == "dev") and python_version >= "3.8"'
        )
        assert not state.applies(requirement)


class TestExplicitIndexes:
    def test_explicit_index_recorded(self, two_index_catalog: IndexCatalog) -> None:
        state = ForkState.root(Universal())
        state.record_explicit_indexes(two_index_catalog, [RootRequirement.parse("foo", B)])
        assert state.fork_indexes.get(FOO) == B

    def test_implicit_requirements_not_recorded(self, two_index_catalog: IndexCatalog) -> None:
        state = ForkState.root(Universal())
        state.record_explicit_indexes(two_index_catalog, [RootRequirement.parse("foo")])
        assert FOO not in state.fork_indexes

    def test_inapplicable_requirement_not_recorded(
        self, two_index_catalog: IndexCatalog
    ) -> None:
        state = ForkState.root(LINUX, {"sys_platform": "linux"})
        requirements = [RootRequirement.parse('foo; sys_platform == "win32"', B)]
        state.record_explicit_indexes(two_index_catalog, requirements)
        assert len(state.fork_indexes) == 0

    def test_conflict_in_universal(self, two_index_catalog: IndexCatalog) -> None:
        state = ForkState.root(Universal())
        requirements = [RootRequirement.parse("foo", B), RootRequirement.parse("foo", A)]
        with pytest.raises(ConflictingIndexesUniversal) as excinfo:
            state.record_explicit_indexes(two_index_catalog, requirements)
        assert excinfo.value.indexes == [str(A), str(B)]

    def test_conflict_carries_fork_markers(self, two_index_catalog: IndexCatalog) -> None:
        fork = Fork(Marker("python_version < '3.9'"))
        state = ForkState.root(fork, {"python_version": "3.8"})
        requirements = [RootRequirement.parse("foo", A), RootRequirement.parse("foo", B)]
        with pytest.raises(ConflictingIndexesFork) as excinfo:
            state.record_explicit_indexes(two_index_catalog, requirements)
        assert str(excinfo.value.fork_markers) == 'python_version < "3.9"'

    def test_unknown_explicit_index(self, two_index_catalog: IndexCatalog) -> None:
        state = ForkState.root(Universal())
        with pytest.raises(UnknownIndexError):
            state.record_explicit_indexes(
                two_index_catalog, [RootRequirement.parse("foo", "https://z.example")]
            )


class TestIndexFor:
    def test_recorded_index_wins(self, two_index_catalog: IndexCatalog) -> None:
        state = ForkState.root(Universal())
        state.record_explicit_indexes(two_index_catalog, [RootRequirement.parse("foo", B)])
        assert state.index_for(two_index_catalog, FOO) == B

    def test_first_serving_index_otherwise(self, two_index_catalog: IndexCatalog) -> None:
        state = ForkState.root(Universal())
        assert state.index_for(two_index_catalog, FOO) == A
        assert state.index_for(two_index_catalog, BAR) == A

    def test_lookup_records_nothing(self, two_index_catalog: IndexCatalog) -> None:
        state = ForkState.root(Universal())
        state.index_for(two_index_catalog, FOO)
        assert FOO not in state.fork_indexes
