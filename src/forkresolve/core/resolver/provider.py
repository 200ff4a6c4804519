"""resolvelib provider and reporter for one fork.

``ForkProvider`` answers resolvelib's questions against an ``IndexCatalog``
from the point of view of a single ``ForkState``: candidates for a package
come only from the index the fork has fixed for it, and dependencies whose
markers do not hold in the fork are dropped.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator, Mapping, Sequence

from packaging.requirements import Requirement
from packaging.specifiers import SpecifierSet
from resolvelib import AbstractProvider, BaseReporter

from forkresolve.core.indexes.catalog import IndexCatalog
from forkresolve.core.names import PackageName
from forkresolve.core.resolver.fork_state import ForkState, ResolvedPackage
from forkresolve.core.resolver.markers import ResolverMarkers

logger = logging.getLogger(__name__)


class ForkProvider(AbstractProvider):
    """Serve candidates and dependencies for one fork."""

    def __init__(self, catalog: IndexCatalog, state: ForkState) -> None:
        self._catalog = catalog
        self._state = state

    def identify(self, requirement_or_candidate: Requirement | ResolvedPackage) -> PackageName:
        if isinstance(requirement_or_candidate, ResolvedPackage):
            return requirement_or_candidate.name
        return PackageName.parse(requirement_or_candidate.name)

    def get_preference(
        self,
        identifier: PackageName,
        resolutions: Mapping[PackageName, ResolvedPackage],
        candidates: Mapping[PackageName, Iterator[ResolvedPackage]],
        information: Mapping[PackageName, Iterator[Any]],
        backtrack_causes: Sequence[Any],
    ) -> str:
        return str(identifier)

    def find_matches(
        self,
        identifier: PackageName,
        requirements: Mapping[PackageName, Iterator[Requirement]],
        incompatibilities: Mapping[PackageName, Iterator[ResolvedPackage]],
    ) -> list[ResolvedPackage]:
        """Versions of *identifier* on its fork index, newest first."""
        index = self._state.index_for(self._catalog, identifier)
        specifier = SpecifierSet()
        for requirement in requirements.get(identifier, iter(())):
            specifier &= requirement.specifier
        rejected = {candidate.version for candidate in incompatibilities.get(identifier, iter(()))}
        return [
            ResolvedPackage(identifier, version, index)
            for version in self._catalog.get(index).versions(identifier)
            if version not in rejected and specifier.contains(version)
        ]

    def is_satisfied_by(self, requirement: Requirement, candidate: ResolvedPackage) -> bool:
        if self.identify(requirement) != candidate.name:
            return False
        return requirement.specifier.contains(candidate.version, prereleases=True)

    def get_dependencies(self, candidate: ResolvedPackage) -> Iterable[Requirement]:
        dependencies = self._catalog.get(candidate.index).dependencies(
            candidate.name, candidate.version
        )
        return [dep for dep in dependencies if self._state.applies(dep)]


class ForkReporter(BaseReporter):
    """Log search progress of one fork at debug level."""

    def __init__(self, markers: ResolverMarkers) -> None:
        self._markers = markers

    def pinning(self, candidate: ResolvedPackage) -> None:
        logger.debug(
            "Pinning %s==%s from %s in split %s",
            candidate.name, candidate.version, candidate.index, self._markers,
        )

    def rejecting_candidate(self, criterion: Any, candidate: ResolvedPackage) -> None:
        logger.debug(
            "Backtracking from %s==%s in split %s",
            candidate.name, candidate.version, self._markers,
        )
