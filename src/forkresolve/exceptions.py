"""forkresolve exception hierarchy.

All public exceptions inherit from ForkResolveError, giving callers a single
base class to catch when they want to handle any forkresolve-specific failure
without swallowing unrelated errors.

Index conflicts come in two kinds that differ only in scope: a universal
conflict carries no marker, a fork conflict always carries one.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from packaging.markers import Marker
    from packaging.specifiers import SpecifierSet

    from forkresolve.core.names import PackageName


class ForkResolveError(Exception):
    """Base exception for all forkresolve errors."""


class ConfigError(ForkResolveError):
    """Raised when a project file or option cannot be interpreted.

    Covers malformed YAML, missing or mistyped keys, and invalid
    environment or logging settings.
    """


class InvalidIndexUrl(ConfigError, ValueError):
    """Raised when an index location is not a usable registry URL."""


class ResolveError(ForkResolveError):
    """Raised when dependency resolution fails.

    Covers unsatisfiable version constraints, references to unknown
    indexes, and packages that resolve to more than one index.
    """


class UnknownIndexError(ResolveError):
    """Raised when a requirement refers to an index the catalog does not hold."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Index `{url}` is not configured")


class NoSolutionError(ResolveError):
    """Raised when no candidate version satisfies the accumulated specifier.

    Attributes:
        package_name: The package that could not be resolved.
        specifier: The combined specifier every candidate was checked against.
        fork_markers: Marker of the fork that failed, or None outside a fork.
    """

    def __init__(
        self,
        package_name: PackageName,
        specifier: SpecifierSet,
        fork_markers: Marker | None = None,
    ) -> None:
        self.package_name = package_name
        self.specifier = specifier
        self.fork_markers = fork_markers
        wanted = str(specifier) or "any version"
        message = f"No version of `{package_name}` satisfies `{wanted}`"
        if fork_markers is not None:
            message += f" in split `{fork_markers}`"
        super().__init__(message)


class ConflictingIndexesError(ResolveError):
    """A package was assigned two different indexes within one resolution.

    Not raised directly; see ``ConflictingIndexesUniversal`` and
    ``ConflictingIndexesFork``.

    Attributes:
        package_name: The package with conflicting indexes.
        indexes: The conflicting index locations, sorted.
    """

    def __init__(self, package_name: PackageName, indexes: list[str], message: str) -> None:
        self.package_name = package_name
        self.indexes = indexes
        super().__init__(message)

    @staticmethod
    def _format_indexes(indexes: list[str]) -> str:
        return "".join(f"\n- {index}" for index in indexes)


class ConflictingIndexesUniversal(ConflictingIndexesError):
    """Conflict in a resolution that is not partitioned by environment.

    Also raised for a resolution pinned to one concrete environment: in both
    cases there is no environment in which the two indexes can coexist.
    """

    def __init__(self, package_name: PackageName, indexes: list[str]) -> None:
        super().__init__(
            package_name,
            indexes,
            f"Requirements contain conflicting indexes for package `{package_name}`:"
            + self._format_indexes(indexes),
        )


class ConflictingIndexesFork(ConflictingIndexesError):
    """Conflict within a single marker-delimited fork.

    Other forks are unaffected by this error.

    Attributes:
        fork_markers: Marker expression of the affected fork.
    """

    def __init__(
        self,
        package_name: PackageName,
        indexes: list[str],
        fork_markers: Marker,
    ) -> None:
        self.fork_markers = fork_markers
        super().__init__(
            package_name,
            indexes,
            f"Requirements contain conflicting indexes for package `{package_name}` "
            f"in split `{fork_markers}`:" + self._format_indexes(indexes),
        )
