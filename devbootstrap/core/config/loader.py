"""
Config loader — locate the three declaration files for a run.

Each file is resolved independently, in order:

    1. download ``{base_url}/{filename}`` into the cache directory
    2. ``config/{filename}`` (plus any extra local candidates) under the
       working directory
    3. the built-in default set, if the file has one

A failed download is a warning, not an error: the next source is tried.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from devbootstrap.adapters.network.fetch import Fetcher
from devbootstrap.core.config.defaults import default_runtimes, default_utilities
from devbootstrap.core.config.parser import parse_declarations, parse_package_names
from devbootstrap.core.config.settings import Settings
from devbootstrap.core.errors import FetchError
from devbootstrap.core.models.tool import DeclaredSet

logger = logging.getLogger(__name__)

SOURCE_REMOTE = "remote"
SOURCE_DEFAULT = "default"


@dataclass(frozen=True)
class ConfigFile:
    """One declaration input and how to interpret it."""

    key: str                                        # runtime, utility, native
    filename: str
    parse: Callable[[str, str], DeclaredSet]
    default: Callable[[], DeclaredSet] | None = None
    extra_local: tuple[str, ...] = ()               # cwd-relative extra candidates


def config_files(settings: Settings) -> list[ConfigFile]:
    """The three inputs, in load order."""
    return [
        ConfigFile(
            key="runtime",
            filename=settings.runtime_file,
            parse=parse_declarations,
            default=default_runtimes,
            extra_local=(".tool-versions",),
        ),
        ConfigFile(
            key="utility",
            filename=settings.utility_file,
            parse=parse_package_names,
            default=default_utilities,
        ),
        ConfigFile(
            key="native",
            filename=settings.native_file,
            parse=parse_package_names,
        ),
    ]


@dataclass
class LoadedConfigs:
    """Declared sets for a run. ``native`` is None when nothing declares it."""

    runtime: DeclaredSet = field(default_factory=default_runtimes)
    utility: DeclaredSet = field(default_factory=default_utilities)
    native: DeclaredSet | None = None
    fetched: list[str] = field(default_factory=list)
    attempted: int = 0

    def to_dict(self) -> dict:
        return {
            "runtime": self.runtime.model_dump(mode="json"),
            "utility": self.utility.model_dump(mode="json"),
            "native": self.native.model_dump(mode="json") if self.native else None,
            "fetched": list(self.fetched),
        }


def _local_candidates(cf: ConfigFile, settings: Settings) -> list[Path]:
    return [settings.local_dir / cf.filename] + [settings.working_dir / p for p in cf.extra_local]


def fetch_config(cf: ConfigFile, settings: Settings, fetcher: Fetcher) -> str | None:
    """Download one file into the cache. Returns its text, or None on failure."""
    url = settings.remote_url(cf.filename)
    dest = settings.cache_dir / cf.filename
    logger.info("Downloading %s...", cf.filename)
    try:
        fetcher.download(url, dest)
        text = dest.read_text(encoding="utf-8")
    except (FetchError, OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to download %s (%s), will use fallbacks", cf.filename, e)
        return None
    logger.info("Downloaded %s", cf.filename)
    return text


def load_config(
    cf: ConfigFile,
    settings: Settings,
    fetcher: Fetcher | None,
) -> tuple[DeclaredSet | None, bool]:
    """Resolve one config file through remote → local → default.

    Returns:
        ``(declared_set, fetched)``. ``declared_set`` is None when no
        source exists and the file has no default.
    """
    if fetcher is not None:
        text = fetch_config(cf, settings, fetcher)
        if text is not None:
            return cf.parse(text, SOURCE_REMOTE), True

    for candidate in _local_candidates(cf, settings):
        if not candidate.is_file():
            continue
        try:
            text = candidate.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Cannot read %s: %s", candidate, e)
            continue
        logger.info("Using %s config from %s", cf.key, candidate)
        return cf.parse(text, str(candidate)), False

    if cf.default is not None:
        logger.warning("No %s config found, using built-in defaults", cf.key)
        return cf.default(), False

    logger.info("No %s config found", cf.key)
    return None, False


def load_all_configs(settings: Settings, fetcher: Fetcher | None) -> LoadedConfigs:
    """Load the runtime, utility and native sets independently."""
    loaded = LoadedConfigs()
    for cf in config_files(settings):
        declared, fetched = load_config(cf, settings, fetcher)
        loaded.attempted += 1
        if fetched:
            loaded.fetched.append(cf.filename)
        if declared is not None:
            setattr(loaded, cf.key, declared)
    return loaded
