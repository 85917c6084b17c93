"""
Runtime settings — where configs come from and where state goes.

Resolution precedence for each field:
    CLI flag  >  environment variable  >  bootstrap.yml  >  built-in default

Environment variables:
    CONFIG_BASE_URL          remote base location for the three config files
    DEVBOOTSTRAP_CACHE_DIR   download cache / history directory
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from devbootstrap.core.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://raw.githubusercontent.com/securityclippy/bootstrap/main/config"
SETTINGS_FILE = "bootstrap.yml"

ENV_BASE_URL = "CONFIG_BASE_URL"
ENV_CACHE_DIR = "DEVBOOTSTRAP_CACHE_DIR"


class Settings(BaseModel):
    """Everything a run needs to know that is not a tool declaration."""

    base_url: str = DEFAULT_BASE_URL
    cache_dir: Path = Field(default_factory=lambda: Path.home() / ".bootstrap-config")
    working_dir: Path = Field(default_factory=Path.cwd)
    home_dir: Path = Field(default_factory=Path.home)
    local_config_dir: Path = Path("config")

    runtime_file: str = "asdf_languages_config.txt"
    utility_file: str = "brew_packages_config.txt"
    native_file: str = "additional_packages_config.txt"

    use_sudo: bool = True
    history_file: str = "history.ndjson"

    @field_validator("cache_dir", "working_dir", "home_dir", "local_config_dir")
    @classmethod
    def expand_user(cls, value: Path) -> Path:
        return value.expanduser()

    @property
    def local_dir(self) -> Path:
        """Local fallback directory, resolved against the working directory."""
        if self.local_config_dir.is_absolute():
            return self.local_config_dir
        return self.working_dir / self.local_config_dir

    @property
    def history_path(self) -> Path:
        return self.cache_dir / self.history_file

    def remote_url(self, filename: str) -> str:
        return f"{self.base_url.rstrip('/')}/{filename}"


def _read_settings_file(path: Path) -> dict[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # Allow everything to sit under a top-level "bootstrap:" key
    if "bootstrap" in data and isinstance(data["bootstrap"], dict):
        data = data["bootstrap"]
    return data


def load_settings(
    path: Path | None = None,
    *,
    env: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> Settings:
    """Build ``Settings`` from file, environment and explicit overrides.

    Args:
        path: Explicit settings file. When None, ``bootstrap.yml`` in the
            working directory is used if present.
        env: Environment mapping (default: ``os.environ``).
        overrides: Values from the CLI. ``None`` values are ignored.

    Raises:
        ConfigError: If the settings file is unreadable or invalid.
    """
    env = os.environ if env is None else env
    overrides = {k: v for k, v in (overrides or {}).items() if v is not None}

    data: dict[str, Any] = {}
    if path is None:
        working_dir = Path(overrides.get("working_dir") or Path.cwd()).expanduser()
        candidate = working_dir / SETTINGS_FILE
        path = candidate if candidate.is_file() else None
    elif not path.is_file():
        raise ConfigError(f"Settings file not found: {path}")

    if path is not None:
        logger.debug("Loading settings from %s", path)
        data.update(_read_settings_file(path))

    if env.get(ENV_BASE_URL):
        data["base_url"] = env[ENV_BASE_URL]
    if env.get(ENV_CACHE_DIR):
        data["cache_dir"] = env[ENV_CACHE_DIR]

    data.update(overrides)

    try:
        settings = Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings: {e}") from e

    return settings
