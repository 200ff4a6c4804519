"""Logging configuration for the forkresolve CLI.

Library modules only create ``logging.getLogger(__name__)`` loggers; this
module decides where their records go. The console verbosity comes from the
``-v`` flags and can be overridden with the ``FORKRESOLVE_LOG`` environment
variable (``debug``, ``info``, ``warning``, ``error``, ``trace`` or ``off``).
A log file, when requested, gets its own level independent of the console.
"""

from __future__ import annotations

import enum
import logging
import os
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from forkresolve.exceptions import ConfigError

LOG_ENV_VAR = "FORKRESOLVE_LOG"

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

_ENV_LEVELS: dict[str, int] = {
    "trace": TRACE,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "warn": logging.WARNING,
    "error": logging.ERROR,
    "off": logging.CRITICAL + 1,
}


class Level(enum.Enum):
    """Console verbosity."""

    DEFAULT = "default"
    VERBOSE = "verbose"
    EXTRA_VERBOSE = "extra-verbose"

    @classmethod
    def from_count(cls, count: int) -> Level:
        if count <= 0:
            return cls.DEFAULT
        if count == 1:
            return cls.VERBOSE
        return cls.EXTRA_VERBOSE


class FileLogLevel(enum.Enum):
    """What goes into ``--log-file``."""

    VERBOSE = "verbose"
    EXTRA_VERBOSE = "extra-verbose"
    TRACE_VERBOSE = "trace-verbose"
    TRACE_EXTRA_VERBOSE = "trace-extra-verbose"


_PLAIN_FORMAT = "%(levelname)s %(message)s"
_DETAILED_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _console_level(level: Level) -> int:
    override = os.environ.get(LOG_ENV_VAR)
    if override:
        try:
            return _ENV_LEVELS[override.strip().lower()]
        except KeyError:
            raise ConfigError(
                f"Invalid {LOG_ENV_VAR} value {override!r}; "
                f"expected one of: {', '.join(sorted(_ENV_LEVELS))}"
            ) from None
    if level is Level.DEFAULT:
        return logging.WARNING
    return logging.DEBUG


def setup_logging(
    level: Level = Level.DEFAULT,
    log_path: Path | None = None,
    file_level: FileLogLevel = FileLogLevel.VERBOSE,
    console: Console | None = None,
) -> logging.Logger:
    """Attach console (and optionally file) handlers to the ``forkresolve`` logger.

    Calling this again replaces the handlers installed by a previous call.

    Args:
        level: Console verbosity.
        log_path: If given, also log to this path with its extension
            replaced by ``.log``. The file is truncated.
        file_level: Verbosity of the log file.
        console: Console to render to; defaults to a stderr console.

    Returns:
        The configured ``forkresolve`` logger.

    Raises:
        ConfigError: If ``FORKRESOLVE_LOG`` is invalid or the log file
            cannot be opened.
    """
    root = logging.getLogger("forkresolve")
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.propagate = False

    console_level = _console_level(level)
    extra = level is Level.EXTRA_VERBOSE
    console_handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=extra,
        show_path=extra,
        markup=False,
    )
    console_handler.setLevel(console_level)
    console_handler.setFormatter(
        logging.Formatter("%(name)s: %(message)s" if extra else "%(message)s")
    )
    root.addHandler(console_handler)
    levels = [console_level]

    if log_path is not None:
        target = Path(log_path).with_suffix(".log")
        try:
            file_handler = logging.FileHandler(target, mode="w", encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Failed to open or create log file: {target}") from exc
        if file_level in (FileLogLevel.VERBOSE, FileLogLevel.EXTRA_VERBOSE):
            file_handler.setLevel(logging.DEBUG)
        else:
            file_handler.setLevel(TRACE)
        if file_level in (FileLogLevel.EXTRA_VERBOSE, FileLogLevel.TRACE_EXTRA_VERBOSE):
            file_handler.setFormatter(logging.Formatter(_DETAILED_FORMAT))
        else:
            file_handler.setFormatter(logging.Formatter(_PLAIN_FORMAT))
        root.addHandler(file_handler)
        levels.append(file_handler.level)

    root.setLevel(min(levels))
    return root
