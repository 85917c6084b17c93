"""
Backend detection — pick the native package manager for this host.

Probes run in a fixed priority order and the first executable found
wins. Finding none is the one fatal condition of a run.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable

from devbootstrap.adapters.base import NativeBackend
from devbootstrap.adapters.packages.native import AptBackend, PacmanBackend, RpmBackend
from devbootstrap.adapters.shell.command import CommandRunner
from devbootstrap.core.errors import UnsupportedHostError

logger = logging.getLogger(__name__)

# (probe executable, backend factory) in priority order
PROBES: tuple[tuple[str, Callable[[CommandRunner], NativeBackend]], ...] = (
    ("apt-get", AptBackend),
    ("yum", lambda runner: RpmBackend(runner, executable="yum")),
    ("dnf", lambda runner: RpmBackend(runner, executable="dnf")),
    ("pacman", PacmanBackend),
)


def detect_backend(runner: CommandRunner, platform_name: str | None = None) -> NativeBackend:
    """Select the native backend for this host.

    Args:
        runner: Command runner used for executable lookup.
        platform_name: Override for ``sys.platform`` (tests).

    Raises:
        UnsupportedHostError: Not Linux, or no known package manager found.
    """
    platform_name = platform_name or sys.platform
    if not platform_name.startswith("linux"):
        raise UnsupportedHostError(
            f"This bootstrapper supports Linux only (platform: {platform_name})"
        )

    for executable, factory in PROBES:
        if runner.which(executable):
            backend = factory(runner)
            logger.debug("Probe %s found → %s", executable, backend.kind.value)
            return backend
        logger.debug("Probe %s not found", executable)

    probed = ", ".join(exe for exe, _ in PROBES)
    raise UnsupportedHostError(f"Unsupported Linux distribution (none of: {probed})")
