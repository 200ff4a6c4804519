"""Package indexes: registry identity and in-memory index metadata."""

from forkresolve.core.indexes.catalog import IndexCatalog, PackageIndex
from forkresolve.core.indexes.url import IndexUrl

__all__ = [
    "IndexCatalog",
    "IndexUrl",
    "PackageIndex",
]
