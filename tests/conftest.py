"""
Shared test fixtures and configuration.
"""

import logging
from pathlib import Path

import pytest

from devbootstrap.adapters.mock import FakeCommandRunner
from devbootstrap.core.config.settings import Settings


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings isolated under a temp directory."""
    work = tmp_path / "work"
    home = tmp_path / "home"
    work.mkdir()
    home.mkdir()
    return Settings(
        base_url="https://example.test/config",
        cache_dir=tmp_path / "cache",
        working_dir=work,
        home_dir=home,
        use_sudo=False,
    )


@pytest.fixture
def fake_runner() -> FakeCommandRunner:
    """A Debian-looking host with brew, asdf, git and zsh on PATH."""
    return FakeCommandRunner(["apt-get", "brew", "asdf", "git", "zsh"])


@pytest.fixture
def restore_root_logger():
    """Undo ``setup_logging`` side effects on the root logger."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for h in root.handlers:
        if h not in handlers:
            h.close()
    root.handlers[:] = handlers
    root.setLevel(level)
