"""forkresolve CLI - Environment-forking dependency resolution.

Entry point for the ``forkresolve`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    resolve - Resolve a project file, one solution per fork.
    check   - Validate a project file.

Usage::

    forkresolve resolve                              # ./forkresolve.yaml
    forkresolve resolve project.yaml -o resolution.json
    forkresolve resolve project.yaml --universal
    forkresolve resolve project.yaml -e sys_platform=linux
    forkresolve check project.yaml
"""

from __future__ import annotations

import click

from forkresolve import __version__
from forkresolve.cli.check_cmd import check_command
from forkresolve.cli.resolve_cmd import resolve_command


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """forkresolve: Environment-forking dependency resolution.

    Resolves requirements into one consistent solution per environment
    split, with every package drawn from exactly one index per split.
    """


cli.add_command(resolve_command)
cli.add_command(check_command)
