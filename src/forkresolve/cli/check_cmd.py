"""``forkresolve check [project]`` - Validate a project file without resolving.

Exit Codes:
    0 - The project file is valid.
    2 - The project file is invalid.
"""

from __future__ import annotations

import sys

import click

from forkresolve.cli.output import print_error
from forkresolve.config import DEFAULT_PROJECT_FILE, load_project
from forkresolve.exceptions import ConfigError


@click.command("check")
@click.argument(
    "project",
    type=click.Path(exists=True, dir_okay=False),
    default=DEFAULT_PROJECT_FILE,
)
def check_command(project: str) -> None:
    """Check that PROJECT is a well-formed forkresolve project file."""
    try:
        config = load_project(project)
    except ConfigError as exc:
        print_error(exc)
        sys.exit(2)

    splits = len(config.forks) or 1
    click.echo(
        f"{project}: {len(config.catalog)} index(es), "
        f"{len(config.requirements)} requirement(s), {splits} split(s)"
    )
    sys.exit(0)
