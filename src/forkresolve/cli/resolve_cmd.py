"""``forkresolve resolve [project]`` - Resolve a project, one solution per fork.

Reads the project file, builds one fork per configured marker (or a single
universal or pinned-environment fork), resolves each independently, and
prints the pinned packages. ``--output`` also writes the resolution as JSON.

Exit Codes:
    0 - Every fork resolved.
    1 - Resolution failed (index conflict or unsatisfiable requirement).
    2 - The project file or an option is invalid, or --output cannot be written.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from forkresolve.cli.output import print_error, print_resolution, write_resolution
from forkresolve.config import DEFAULT_PROJECT_FILE, load_project, parse_environment_option
from forkresolve.core.resolver import Resolver
from forkresolve.exceptions import ConfigError, ResolveError
from forkresolve.logging_setup import FileLogLevel, Level, setup_logging

logger = logging.getLogger(__name__)


@click.command("resolve")
@click.argument(
    "project",
    type=click.Path(exists=True, dir_okay=False),
    default=DEFAULT_PROJECT_FILE,
)
@click.option(
    "--universal",
    is_flag=True,
    help="Ignore configured forks and resolve once for every environment.",
)
@click.option(
    "--environment", "-e",
    multiple=True,
    metavar="KEY=VALUE",
    help="Resolve for a single pinned environment (repeatable).",
)
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write the resolution as JSON to this path.",
)
@click.option(
    "--jobs", "-j",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="Number of forks resolved concurrently.",
)
@click.option("--verbose", "-v", count=True, help="Increase log verbosity (-v, -vv).")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Also write logs to this file (extension replaced by .log).",
)
@click.option(
    "--log-file-level",
    type=click.Choice([level.value for level in FileLogLevel]),
    default=FileLogLevel.VERBOSE.value,
    show_default=True,
    help="Verbosity of --log-file.",
)
def resolve_command(
    project: str,
    universal: bool,
    environment: tuple[str, ...],
    output: str | None,
    jobs: int,
    verbose: int,
    log_file: str | None,
    log_file_level: str,
) -> None:
    """Resolve PROJECT into one consistent solution per fork.

    Exit code 0 on success, 1 on resolution failure, 2 on invalid input.
    """
    try:
        setup_logging(
            Level.from_count(verbose),
            Path(log_file) if log_file else None,
            FileLogLevel(log_file_level),
        )
        config = load_project(project)
        pinned = parse_environment_option(environment)
        if universal and pinned is not None:
            raise ConfigError("--universal and --environment cannot be combined")
    except ConfigError as exc:
        print_error(exc)
        sys.exit(2)

    forks = []
    if not universal and pinned is None:
        forks, pinned = config.forks, config.environment
    logger.debug(
        "Resolving %d requirements across %d split(s)",
        len(config.requirements),
        max(len(forks), 1),
    )

    resolver = Resolver(
        config.requirements,
        config.catalog,
        forks=forks,
        environment=pinned,
        max_workers=jobs,
    )
    try:
        resolution = resolver.resolve()
    except ResolveError as exc:
        print_error(exc)
        sys.exit(1)

    print_resolution(resolution)
    if output:
        try:
            write_resolution(resolution, Path(output))
        except OSError as exc:
            print_error(ConfigError(f"Cannot write resolution to {output}: {exc}"))
            sys.exit(2)
        click.echo(f"\nResolution written to: {output}")
    sys.exit(0)
