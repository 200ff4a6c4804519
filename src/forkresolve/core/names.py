"""Normalized package names.

Package names are compared in their PEP 503 normalized form: lowercase, with
runs of ``-``, ``_`` and ``.`` collapsed to a single ``-``. ``Foo.Bar``,
``foo_bar`` and ``FOO-bar`` all name the same package.
"""

from __future__ import annotations

from dataclasses import dataclass

from packaging.utils import canonicalize_name


@dataclass(frozen=True, order=True)
class PackageName:
    """A package name, stored only in its normalized form.

    Use ``PackageName.parse`` (or ``PackageName.of``) to build one from
    user-supplied spelling; the constructor expects an already normalized
    value.
    """

    value: str

    @classmethod
    def parse(cls, raw: str) -> PackageName:
        """Normalize *raw* and wrap it.

        Raises:
            ValueError: If *raw* is empty or only whitespace.
        """
        stripped = raw.strip()
        if not stripped:
            raise ValueError("Package name must not be empty")
        return cls(str(canonicalize_name(stripped)))

    @classmethod
    def of(cls, name: str | PackageName) -> PackageName:
        if isinstance(name, PackageName):
            return name
        return cls.parse(name)

    def __str__(self) -> str:
        return self.value
