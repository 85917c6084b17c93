"""
Logging configuration — one call at CLI start.

Progress of a bootstrap run is reported through ``logging`` (stderr);
the final summary is printed by the CLI itself. Every module does
``logger = logging.getLogger(__name__)`` and inherits this setup.

Console level precedence:
    --debug  >  --verbose  >  --quiet  >  DEVBOOTSTRAP_LOG_LEVEL  >  INFO

A second, usually more detailed, log file can be requested with
DEVBOOTSTRAP_LOG_FILE and DEVBOOTSTRAP_LOG_FILE_LEVEL. Long installer
runs are much easier to diagnose from a DEBUG file behind a quiet
console.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping

ENV_LEVEL = "DEVBOOTSTRAP_LOG_LEVEL"
ENV_FILE = "DEVBOOTSTRAP_LOG_FILE"
ENV_FILE_LEVEL = "DEVBOOTSTRAP_LOG_FILE_LEVEL"

# (threshold, format, datefmt): first row whose threshold >= level wins
_CONSOLE_FORMATS: tuple[tuple[int, str, str | None], ...] = (
    (logging.DEBUG, "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d  %(message)s", "%H:%M:%S"),
    (logging.INFO, "%(asctime)s %(message)s", "%H:%M:%S"),
    (logging.CRITICAL, "%(levelname)s: %(message)s", None),
)

_FILE_FORMAT = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d  %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"


def resolve_level(
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    env: Mapping[str, str] | None = None,
) -> str:
    """Pick the console level name from CLI flags and the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "WARNING"
    env = os.environ if env is None else env
    return env.get(ENV_LEVEL, "INFO")


def _console_formatter(level: int) -> logging.Formatter:
    for threshold, fmt, datefmt in _CONSOLE_FORMATS:
        if level <= threshold:
            return logging.Formatter(fmt, datefmt=datefmt)
    return logging.Formatter(_CONSOLE_FORMATS[-1][1])


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Configure the root logger for the whole process.

    Calling it again replaces the previous handlers.

    Args:
        level: Console level name.
        log_file: Optional path of an additional log file.
        log_file_level: Level for the file; defaults to ``level``.
    """
    console_level = _parse_level(level)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(_console_formatter(console_level))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root_level = console_level

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setLevel(file_level)
        handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
        root.addHandler(handler)
        root_level = min(root_level, file_level)

    # The root gate must let through whatever the most verbose handler wants
    root.setLevel(root_level)
    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    """Level name to number; unknown or empty names mean INFO."""
    if not level:
        return logging.INFO
    numeric = logging.getLevelName(level.upper())
    return numeric if isinstance(numeric, int) else logging.INFO
