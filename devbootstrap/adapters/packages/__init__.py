"""Flat package backends: the native distro managers and Homebrew."""

from devbootstrap.adapters.packages.homebrew import HomebrewAdapter
from devbootstrap.adapters.packages.native import AptBackend, PacmanBackend, RpmBackend

__all__ = [
    "AptBackend",
    "HomebrewAdapter",
    "PacmanBackend",
    "RpmBackend",
]
