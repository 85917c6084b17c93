"""
Login shell — make zsh the user's default shell.

The passwd entry is read first; ``chsh`` runs only when the login
shell differs from the zsh found on PATH, so a converged host records
nothing.
"""

from __future__ import annotations

import logging
import os

from devbootstrap.adapters.shell.command import CommandRunner
from devbootstrap.core.models.ledger import StepRecord

logger = logging.getLogger(__name__)

FAILED_LABEL = "Failed to change default shell to zsh"


def current_user() -> str:
    return os.getenv("USER", os.getenv("LOGNAME", ""))


def login_shell(runner: CommandRunner, user: str) -> str | None:
    """The shell field of ``user``'s passwd entry, or None if unknown."""
    r = runner.run(["getent", "passwd", user])
    if not r.ok:
        logger.debug("getent passwd %s: %s", user, r.summary)
        return None
    fields = r.stdout.strip().split(":")
    return fields[6] if len(fields) >= 7 else None


def set_default_shell(runner: CommandRunner, user: str | None = None) -> StepRecord | None:
    """Switch ``user`` (default: the invoking user) to zsh.

    Returns None when zsh already is the login shell.
    """
    zsh = runner.which("zsh")
    if not zsh:
        return StepRecord.failure(FAILED_LABEL, detail="zsh not found in PATH")

    user = user or current_user()
    if not user:
        return StepRecord.failure(FAILED_LABEL, detail="cannot determine the current user")

    if login_shell(runner, user) == zsh:
        logger.info("zsh is already the default shell")
        return None

    logger.info("Setting %s as default shell for %s...", zsh, user)
    r = runner.run(["chsh", "-s", zsh, user], sudo=True)
    if not r.ok:
        logger.warning("You may need to run 'chsh -s %s' manually", zsh)
        return StepRecord.failure(FAILED_LABEL, detail=r.summary)

    logger.info("Log out and back in for the new shell to take effect")
    return StepRecord.success("Default shell changed to zsh", detail=zsh)
