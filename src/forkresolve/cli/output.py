"""Rich output formatting helpers for the forkresolve CLI.

Successful resolutions are printed as one table per fork. Failures are
written to stderr as plain text so the message stays byte-identical across
runs and terminals.
"""

from __future__ import annotations

import json
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from forkresolve.core.resolver import ForkResolution, Resolution, fork_label
from forkresolve.exceptions import ConflictingIndexesError, ForkResolveError

console = Console()


def _fork_title(fork: ForkResolution) -> str:
    label = fork_label(fork.markers)
    return "Universal resolution" if label is None else f"Split: {label}"


def print_resolution(resolution: Resolution) -> None:
    """Print one table of pinned packages per fork.

    Args:
        resolution: A successful resolution.
    """
    console.print(
        Panel("[bold green]Resolution successful[/bold green]", title="Dependency Resolution")
    )
    for fork in resolution.forks:
        if not fork.packages:
            console.print(f"[dim]{_fork_title(fork)}: no packages to resolve.[/dim]")
            continue
        table = Table(title=_fork_title(fork), show_header=True, header_style="bold")
        table.add_column("Package", style="bold")
        table.add_column("Version")
        table.add_column("Index", style="dim")
        for pkg in sorted(fork.packages.values()):
            table.add_row(str(pkg.name), str(pkg.version), str(pkg.index))
        console.print(table)


def print_error(error: ForkResolveError) -> None:
    """Write *error* to stderr, prefixed the same way for every error kind."""
    prefix = "error"
    if isinstance(error, ConflictingIndexesError):
        prefix = "error (index conflict)"
    click.echo(f"{prefix}: {error}", err=True)


def write_resolution(resolution: Resolution, path: Path) -> None:
    """Write *resolution* as deterministic JSON (sorted keys, trailing newline)."""
    path.write_text(
        json.dumps(resolution.to_dict(), indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
