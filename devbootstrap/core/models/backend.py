"""
Backend kinds — the closed set of native package managers we support.
"""

from __future__ import annotations

from enum import Enum


class BackendKind(str, Enum):
    """Native package-manager family selected once per run."""

    DEBIAN_APT = "debian-apt"
    RHEL_YUM_DNF = "rhel-yum-dnf"
    ARCH_PACMAN = "arch-pacman"

    @property
    def distro(self) -> str:
        """Short distribution family name used in log lines."""
        return self.value.split("-", 1)[0]
