"""Fork identity: the slice of environment space a resolution pass covers.

``ResolverMarkers`` is a closed union of three variants:

- ``Universal``: one resolution for every target environment.
- ``SpecificEnvironment``: one fully pinned concrete environment.
- ``Fork``: the environments satisfying a marker expression.

Consumers dispatch with ``isinstance`` over all three and raise ``TypeError``
for anything else; there is no shared base class to fall back on.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Union

from packaging.markers import Marker


@dataclass(frozen=True)
class Universal:
    """Resolve once for all environments; only ``extra`` markers are evaluated."""

    def __str__(self) -> str:
        return "universal"


@dataclass(frozen=True)
class SpecificEnvironment:
    """Resolve for one concrete environment.

    Attributes:
        environment: Marker variable -> value (e.g. ``{"sys_platform": "linux"}``).
            Variables left out fall back to the running interpreter's values.
    """

    environment: Mapping[str, str] = field(default_factory=dict)

    def __hash__(self) -> int:
        return hash(tuple(sorted(self.environment.items())))

    def __str__(self) -> str:
        pairs = ", ".join(f"{k}={v}" for k, v in sorted(self.environment.items()))
        return f"environment({pairs})"


@dataclass(frozen=True)
class Fork:
    """Resolve for the environments where *markers* holds.

    Attributes:
        markers: The fork's marker expression, kept for diagnostics.
    """

    markers: Marker

    def __str__(self) -> str:
        return str(self.markers)


ResolverMarkers = Union[Universal, SpecificEnvironment, Fork]


def fork_markers(markers: ResolverMarkers) -> Marker | None:
    """Return the marker to attribute errors to, or None for whole-environment passes."""
    if isinstance(markers, (Universal, SpecificEnvironment)):
        return None
    if isinstance(markers, Fork):
        return markers.markers
    raise TypeError(f"Unknown resolver markers: {markers!r}")
