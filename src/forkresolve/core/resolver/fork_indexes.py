"""Per-fork record of which index each package comes from.

Within one fork every package must resolve to a single index. Different forks
may pick different indexes for the same package, so each ``ForkState`` owns
its own ``ForkIndexes`` and never shares it.
"""

from __future__ import annotations

import logging

from forkresolve.core.indexes.url import IndexUrl
from forkresolve.core.names import PackageName
from forkresolve.core.resolver.markers import (
    Fork,
    ResolverMarkers,
    SpecificEnvironment,
    Universal,
)
from forkresolve.exceptions import ConflictingIndexesFork, ConflictingIndexesUniversal

logger = logging.getLogger(__name__)


class ForkIndexes:
    """Mapping of package name to the index it was assigned in this fork.

    A failed ``insert`` does not modify the mapping: the index recorded first
    stays recorded, so a caller that catches the conflict and keeps going
    still sees consistent state.
    """

    def __init__(self) -> None:
        self._indexes: dict[PackageName, IndexUrl] = {}

    def get(self, package_name: PackageName) -> IndexUrl | None:
        """Return the index previously used for *package_name* in this fork."""
        return self._indexes.get(package_name)

    def insert(
        self,
        package_name: PackageName,
        index: IndexUrl,
        fork_markers: ResolverMarkers,
    ) -> None:
        """Check that *index* is the only index used for *package_name* in this fork.

        Args:
            package_name: Package being assigned.
            index: Candidate index for the package.
            fork_markers: Identity of the enclosing fork, used to scope the error.

        Raises:
            ConflictingIndexesUniversal: If a different index is already recorded
                and the fork covers the whole (or a single pinned) environment.
            ConflictingIndexesFork: If a different index is already recorded
                and the fork is marker-delimited.
        """
        previous = self._indexes.get(package_name)
        if previous is None:
            self._indexes[package_name] = index
            return
        if previous == index:
            return

        conflicts = sorted([str(previous), str(index)])
        logger.debug(
            "Index conflict for %s in %s: %s", package_name, fork_markers, conflicts
        )
        if isinstance(fork_markers, (Universal, SpecificEnvironment)):
            raise ConflictingIndexesUniversal(package_name, conflicts)
        if isinstance(fork_markers, Fork):
            raise ConflictingIndexesFork(package_name, conflicts, fork_markers.markers)
        raise TypeError(f"Unknown resolver markers: {fork_markers!r}")

    def copy(self) -> ForkIndexes:
        """Return an independent tracker with the same assignments."""
        clone = ForkIndexes()
        clone._indexes = dict(self._indexes)
        return clone

    def items(self) -> list[tuple[PackageName, IndexUrl]]:
        """Return the assignments sorted by package name."""
        return sorted(self._indexes.items())

    def __contains__(self, package_name: object) -> bool:
        return package_name in self._indexes

    def __len__(self) -> int:
        return len(self._indexes)

    def __repr__(self) -> str:
        inner = ", ".join(f"{name}={index}" for name, index in self.items())
        return f"ForkIndexes({inner})"
