"""
Error taxonomy for the bootstrapper.

Only ``UnsupportedHostError`` is allowed to stop a run. Everything else
raised inside a stage is caught by the stage executor and turned into a
failed ledger entry.
"""

from __future__ import annotations


class BootstrapError(Exception):
    """Base class for all bootstrapper errors."""


class UnsupportedHostError(BootstrapError):
    """No supported native package manager was found on this host."""


class ConfigError(BootstrapError):
    """Raised when settings or declaration files are invalid."""


class FetchError(BootstrapError):
    """Raised when a remote file cannot be downloaded."""
