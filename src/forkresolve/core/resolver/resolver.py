"""Forking resolver: one resolvelib search per fork.

The resolver builds one ``ForkState`` per fork (a single ``Universal`` or
``SpecificEnvironment`` fork, or one ``Fork`` per configured marker). Each
fork first records the explicit indexes of its applicable root requirements,
so index conflicts surface before any version is chosen and are never
backtracked over. Versions are then picked by ``resolvelib`` through a
``ForkProvider``, newest first, backtracking on unsatisfiable specifiers.

Forks share no mutable state, so ``max_workers > 1`` explores them on a
thread pool without any locking.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

import resolvelib
from packaging.markers import Marker
from packaging.specifiers import SpecifierSet

from forkresolve.core.indexes.catalog import IndexCatalog
from forkresolve.core.names import PackageName
from forkresolve.core.resolver.fork_state import (
    NO_EXTRAS,
    ForkState,
    ResolvedPackage,
    RootRequirement,
)
from forkresolve.core.resolver.markers import (
    Fork,
    ResolverMarkers,
    SpecificEnvironment,
    Universal,
    fork_markers,
)
from forkresolve.core.resolver.provider import ForkProvider, ForkReporter
from forkresolve.exceptions import NoSolutionError, ResolveError

logger = logging.getLogger(__name__)

DEFAULT_MAX_ROUNDS = 10_000


# ---------------------------------------------------------------------------
# Inputs and outputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ForkSpec:
    """A configured fork.

    Attributes:
        markers: Marker expression delimiting the fork.
        environment: Representative environment used to decide which
            requirements apply in the fork. It must satisfy *markers*.

    Raises:
        ValueError: If *environment* does not satisfy *markers*.
    """

    markers: Marker
    environment: Mapping[str, str]

    def __post_init__(self) -> None:
        if not self.markers.evaluate({**NO_EXTRAS, **self.environment}):
            raise ValueError(
                f"environment {dict(self.environment)} does not satisfy `{self.markers}`"
            )

    @classmethod
    def parse(cls, markers: str, environment: Mapping[str, str]) -> ForkSpec:
        return cls(Marker(markers), dict(environment))


@dataclass
class ForkResolution:
    """The solution of one fork."""

    markers: ResolverMarkers
    packages: dict[PackageName, ResolvedPackage] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "markers": fork_label(self.markers),
            "packages": [
                {
                    "name": str(pkg.name),
                    "version": str(pkg.version),
                    "index": str(pkg.index),
                }
                for pkg in sorted(self.packages.values())
            ],
        }


@dataclass
class Resolution:
    """Result of a successful resolution: one entry per fork, in configuration order."""

    forks: list[ForkResolution] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"forks": [fork.to_dict() for fork in self.forks]}


def fork_label(markers: ResolverMarkers) -> str | None:
    """Human-facing label for a fork; None for a universal resolution."""
    if isinstance(markers, Universal):
        return None
    if isinstance(markers, (SpecificEnvironment, Fork)):
        return str(markers)
    raise TypeError(f"Unknown resolver markers: {markers!r}")


def _no_solution(causes: Sequence[Any], markers: ResolverMarkers) -> NoSolutionError:
    name = min(PackageName.parse(cause.requirement.name) for cause in causes)
    specifier = SpecifierSet()
    for cause in causes:
        if PackageName.parse(cause.requirement.name) == name:
            specifier &= cause.requirement.specifier
    return NoSolutionError(name, specifier, fork_markers(markers))


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------


class Resolver:
    """Resolve root requirements against an index catalog, fork by fork.

    Args:
        requirements: Root requirements, in the order the user gave them.
        catalog: The indexes packages may be drawn from.
        forks: Marker partitions to resolve independently. Mutually
            exclusive with *environment*.
        environment: A single pinned environment to resolve for.
        max_workers: Number of forks explored concurrently.
        max_rounds: Upper bound on resolvelib rounds per fork.
    """

    def __init__(
        self,
        requirements: list[RootRequirement],
        catalog: IndexCatalog,
        forks: list[ForkSpec] | None = None,
        environment: Mapping[str, str] | None = None,
        max_workers: int = 1,
        max_rounds: int = DEFAULT_MAX_ROUNDS,
    ) -> None:
        if forks and environment is not None:
            raise ValueError("forks and environment are mutually exclusive")
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self._requirements = list(requirements)
        self._catalog = catalog
        self._forks = list(forks or [])
        self._environment = environment
        self._max_workers = max_workers
        self._max_rounds = max_rounds

    def root_states(self) -> list[ForkState]:
        """Build the initial state of every fork."""
        if self._forks:
            return [ForkState.root(Fork(spec.markers), spec.environment) for spec in self._forks]
        if self._environment is not None:
            return [ForkState.root(SpecificEnvironment(dict(self._environment)))]
        return [ForkState.root(Universal())]

    def resolve(self) -> Resolution:
        """Resolve every fork.

        Returns:
            A ``Resolution`` with one ``ForkResolution`` per fork.

        Raises:
            ResolveError: The error of the first failing fork, in configuration
                order. Failures of later forks are logged.
        """
        states = self.root_states()
        if self._max_workers > 1 and len(states) > 1:
            with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
                outcomes = list(pool.map(self._run_fork, states))
        else:
            outcomes = [self._run_fork(state) for state in states]

        errors = []
        for state, (_, error) in zip(states, outcomes):
            if error is not None:
                logger.info("Split %s failed: %s", state.markers, error)
                errors.append(error)
        if errors:
            raise errors[0]
        return Resolution(forks=[solution for solution, _ in outcomes if solution is not None])

    def _run_fork(
        self, state: ForkState
    ) -> tuple[ForkResolution | None, ResolveError | None]:
        logger.debug("Solving split %s", state.markers)
        try:
            state.record_explicit_indexes(self._catalog, self._requirements)
            packages = self._search(state)
        except ResolveError as exc:
            return None, exc
        logger.debug("Split %s resolved %d packages", state.markers, len(packages))
        return ForkResolution(markers=state.markers, packages=packages), None

    def _search(self, state: ForkState) -> dict[PackageName, ResolvedPackage]:
        # Sorted so the search never sees the order requirements were listed in.
        roots = sorted(
            (root.requirement for root in self._requirements if state.applies(root.requirement)),
            key=str,
        )
        engine = resolvelib.Resolver(ForkProvider(self._catalog, state), ForkReporter(state.markers))
        try:
            result = engine.resolve(roots, max_rounds=self._max_rounds)
        except resolvelib.ResolutionImpossible as exc:
            raise _no_solution(exc.causes, state.markers) from exc
        except resolvelib.ResolutionTooDeep as exc:
            raise ResolveError(
                f"Split {state.markers} did not resolve within {self._max_rounds} rounds"
            ) from exc
        return dict(result.mapping)
