"""Adapters — bindings to the installer tools and the host.

Public re-exports for convenient access.
"""

from devbootstrap.adapters.base import Adapter, NativeBackend, PackageManager, VersionManager
from devbootstrap.adapters.shell.command import CommandResult, CommandRunner

__all__ = [
    "Adapter",
    "CommandResult",
    "CommandRunner",
    "NativeBackend",
    "PackageManager",
    "VersionManager",
]
