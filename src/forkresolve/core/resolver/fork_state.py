"""Per-fork resolution state.

A ``ForkState`` is what one fork carries through its search: its identity,
the environment its requirement markers are evaluated against, and its own
``ForkIndexes``. Only indexes the user named explicitly are recorded in the
tracker, and they are all recorded before the version search starts. A
package without an explicit index takes the recorded index if there is one,
otherwise the first catalog index serving it, so the outcome does not depend
on the order requirements are listed in.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from packaging.markers import Marker
from packaging.requirements import Requirement
from packaging.version import Version

from forkresolve.core.indexes.catalog import IndexCatalog
from forkresolve.core.indexes.url import IndexUrl
from forkresolve.core.names import PackageName
from forkresolve.core.resolver.fork_indexes import ForkIndexes
from forkresolve.core.resolver.markers import (
    Fork,
    ResolverMarkers,
    SpecificEnvironment,
    Universal,
)

# Extras are never expanded, so ``extra`` markers see no requested extra.
NO_EXTRAS = {"extra": ""}


@dataclass(frozen=True)
class RootRequirement:
    """A requirement as written by the user, with an optional explicit index.

    Attributes:
        requirement: Parsed PEP 508 requirement (name, specifier, marker).
        index: Index the package must come from, or None to let the
            resolver pick one.
    """

    requirement: Requirement
    index: IndexUrl | None = None

    @classmethod
    def parse(cls, text: str, index: str | IndexUrl | None = None) -> RootRequirement:
        return cls(Requirement(text), IndexUrl.of(index) if index is not None else None)

    @property
    def name(self) -> PackageName:
        return PackageName.parse(self.requirement.name)

    def __str__(self) -> str:
        if self.index is None:
            return str(self.requirement)
        return f"{self.requirement} (from {self.index})"


@dataclass(frozen=True, order=True)
class ResolvedPackage:
    """One package pinned by a fork: name, version and the index it comes from."""

    name: PackageName
    version: Version
    index: IndexUrl


def _evaluate_extras(markers: list[Any]) -> bool:
    # Walks packaging's parsed marker list. ``extra`` clauses are evaluated
    # against no requested extras; every other clause is taken as true.
    groups: list[list[bool]] = [[]]
    for item in markers:
        if isinstance(item, list):
            groups[-1].append(_evaluate_extras(item))
        elif isinstance(item, tuple):
            lhs, op, rhs = item
            if "extra" in (lhs.serialize(), rhs.serialize()):
                clause = Marker(f"{lhs.serialize()} {op.serialize()} {rhs.serialize()}")
                groups[-1].append(clause.evaluate(NO_EXTRAS))
            else:
                groups[-1].append(True)
        elif item == "or":
            groups.append([])
    return any(all(group) for group in groups)


@dataclass
class ForkState:
    """Resolution state of a single fork.

    Attributes:
        markers: Identity of the fork, threaded into every index assignment.
        environment: Representative environment used to evaluate requirement
            markers. None only for ``Universal``.
        fork_indexes: Package -> explicit index assignments for this fork only.
    """

    markers: ResolverMarkers
    environment: Mapping[str, str] | None = None
    fork_indexes: ForkIndexes = field(default_factory=ForkIndexes)

    @classmethod
    def root(
        cls,
        markers: ResolverMarkers,
        environment: Mapping[str, str] | None = None,
    ) -> ForkState:
        """Create the initial state of a fork.

        Raises:
            ValueError: If a ``Fork`` is given no representative environment.
            TypeError: If *markers* is not a ``ResolverMarkers`` variant.
        """
        if isinstance(markers, Universal):
            environment = None
        elif isinstance(markers, SpecificEnvironment):
            environment = dict(markers.environment)
        elif isinstance(markers, Fork):
            if environment is None:
                raise ValueError(f"Split `{markers}` needs a representative environment")
            environment = dict(environment)
        else:
            raise TypeError(f"Unknown resolver markers: {markers!r}")
        return cls(markers=markers, environment=environment)

    def applies(self, requirement: Requirement) -> bool:
        """Return True if *requirement* is relevant to this fork.

        A universal fork keeps every requirement except those guarded by an
        ``extra`` marker; the other variants evaluate the whole marker
        against their environment.
        """
        if requirement.marker is None:
            return True
        if self.environment is None:
            return _evaluate_extras(requirement.marker._markers)
        return requirement.marker.evaluate({**NO_EXTRAS, **self.environment})

    def record_explicit_indexes(
        self,
        catalog: IndexCatalog,
        requirements: list[RootRequirement],
    ) -> None:
        """Record the explicit index of every applicable root requirement.

        Requirements are recorded sorted by package and index, so the first
        conflict reported is the same whatever order they were listed in.

        Raises:
            ConflictingIndexesUniversal: see ``ForkIndexes.insert``.
            ConflictingIndexesFork: see ``ForkIndexes.insert``.
            UnknownIndexError: If an explicit index is not in the catalog.
        """
        explicit = sorted(
            (root.name, root.index)
            for root in requirements
            if root.index is not None and self.applies(root.requirement)
        )
        for name, index in explicit:
            self.fork_indexes.insert(name, catalog.get(index).url, self.markers)

    def index_for(self, catalog: IndexCatalog, name: PackageName) -> IndexUrl:
        """The index *name* is drawn from in this fork; nothing is recorded."""
        recorded = self.fork_indexes.get(name)
        if recorded is not None:
            return recorded
        return catalog.find(name).url
