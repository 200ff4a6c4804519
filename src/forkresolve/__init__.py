"""forkresolve: environment-forking dependency resolution with per-fork index consistency."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"
