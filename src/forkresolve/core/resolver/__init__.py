"""Environment-forking resolution with per-fork index consistency.

All public names are re-exported here so that callers can write
``from forkresolve.core.resolver import Resolver``.
"""

from forkresolve.core.resolver.fork_indexes import ForkIndexes
from forkresolve.core.resolver.fork_state import (
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
from forkresolve.core.resolver.resolver import (
    ForkResolution,
    ForkSpec,
    Resolution,
    Resolver,
    fork_label,
)

__all__ = [
    "Fork",
    "ForkIndexes",
    "ForkProvider",
    "ForkReporter",
    "ForkResolution",
    "ForkSpec",
    "ForkState",
    "ResolvedPackage",
    "Resolution",
    "Resolver",
    "ResolverMarkers",
    "RootRequirement",
    "SpecificEnvironment",
    "Universal",
    "fork_label",
    "fork_markers",
]
