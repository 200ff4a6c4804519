"""Index identity: the canonical location of a package registry.

Two ``IndexUrl`` values are the same index iff their normalized locations are
equal. Normalization lowercases the scheme and host and drops a trailing
slash, so ``HTTPS://Pypi.org/simple/`` and ``https://pypi.org/simple`` are one
index. Path case is preserved.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlsplit, urlunsplit

from forkresolve.exceptions import InvalidIndexUrl

_ALLOWED_SCHEMES = frozenset({"http", "https", "file"})


def _normalize(raw: str) -> str:
    stripped = raw.strip()
    if not stripped:
        raise InvalidIndexUrl("Index URL must not be empty")
    parts = urlsplit(stripped)
    scheme = parts.scheme.lower()
    if scheme not in _ALLOWED_SCHEMES:
        raise InvalidIndexUrl(
            f"Unsupported index URL {raw!r}: expected an http, https or file URL"
        )
    if scheme != "file" and not parts.netloc:
        raise InvalidIndexUrl(f"Index URL {raw!r} has no host")
    path = parts.path.rstrip("/")
    return urlunsplit((scheme, parts.netloc.lower(), path, parts.query, parts.fragment))


@dataclass(frozen=True, order=True)
class IndexUrl:
    """A normalized, totally ordered registry location.

    Ordering and equality both use the normalized string, so sorting a list
    of ``IndexUrl`` gives the same order as sorting their ``str()`` forms.

    Attributes:
        url: The normalized location.
    """

    url: str

    @classmethod
    def parse(cls, raw: str) -> IndexUrl:
        """Normalize *raw* into an ``IndexUrl``.

        Raises:
            InvalidIndexUrl: If *raw* is empty, has an unsupported scheme,
                or is a network URL without a host.
        """
        return cls(_normalize(raw))

    @classmethod
    def of(cls, url: str | IndexUrl) -> IndexUrl:
        if isinstance(url, IndexUrl):
            return url
        return cls.parse(url)

    def __str__(self) -> str:
        return self.url
