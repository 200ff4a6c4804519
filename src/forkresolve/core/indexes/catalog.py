"""In-memory package indexes and the catalog that orders them.

A ``PackageIndex`` is what a resolver sees of one registry: for each package,
the available versions and the dependencies each version declares. The
``IndexCatalog`` holds indexes in declaration order; the first one is the
default index.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from packaging.requirements import Requirement
from packaging.version import Version

from forkresolve.core.indexes.url import IndexUrl
from forkresolve.core.names import PackageName
from forkresolve.exceptions import UnknownIndexError


@dataclass
class PackageIndex:
    """Metadata served by a single registry.

    Attributes:
        url: Identity of the registry.
        packages: Package name -> version -> declared dependencies.
    """

    url: IndexUrl
    packages: dict[PackageName, dict[Version, list[Requirement]]] = field(
        default_factory=dict
    )

    def add(
        self,
        name: str | PackageName,
        version: str | Version,
        dependencies: list[str | Requirement] | None = None,
    ) -> None:
        """Publish *name* at *version*, replacing an existing release."""
        parsed = version if isinstance(version, Version) else Version(version)
        deps = [
            dep if isinstance(dep, Requirement) else Requirement(dep)
            for dep in (dependencies or [])
        ]
        self.packages.setdefault(PackageName.of(name), {})[parsed] = deps

    def serves(self, name: PackageName) -> bool:
        return name in self.packages

    def versions(self, name: PackageName) -> list[Version]:
        """Return the versions of *name*, newest first. Empty if unknown."""
        return sorted(self.packages.get(name, {}), reverse=True)

    def dependencies(self, name: PackageName, version: Version) -> list[Requirement]:
        return list(self.packages.get(name, {}).get(version, []))


class IndexCatalog:
    """Ordered collection of the indexes a resolution may draw from."""

    def __init__(self, indexes: list[PackageIndex] | None = None) -> None:
        self._indexes: dict[IndexUrl, PackageIndex] = {}
        for index in indexes or []:
            self.add(index)

    def add(self, index: PackageIndex) -> None:
        """Add *index*; a later index with the same URL replaces the earlier one."""
        self._indexes[index.url] = index

    def get(self, url: IndexUrl) -> PackageIndex:
        """Return the index at *url*.

        Raises:
            UnknownIndexError: If no such index is configured.
        """
        try:
            return self._indexes[url]
        except KeyError:
            raise UnknownIndexError(str(url)) from None

    @property
    def default(self) -> PackageIndex:
        """The first configured index."""
        for index in self._indexes.values():
            return index
        raise UnknownIndexError("<default>")

    def find(self, name: PackageName) -> PackageIndex:
        """Return the first index serving *name*, or the default index."""
        for index in self._indexes.values():
            if index.serves(name):
                return index
        return self.default

    def __iter__(self):
        return iter(self._indexes.values())

    def __len__(self) -> int:
        return len(self._indexes)
