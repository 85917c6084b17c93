"""
Version-tool reconciliation — drive asdf to the declared runtimes.

Each versioned declaration walks a small state machine::

    UNKNOWN → PLUGIN_CHECKED → PLUGIN_PRESENT | PLUGIN_ADDED
            → VERSION_CHECKED → VERSION_PRESENT | VERSION_INSTALLED
            → SELECTED

Any mutating call (plugin add, install) is issued only after the
matching existence check reported the target absent. A failed plugin
add or install moves the tool to FAILED and stops its walk; the other
declarations still run. Selecting the global version is best-effort and
never undoes a successful install.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from devbootstrap.adapters.base import VersionManager
from devbootstrap.core.models.ledger import StepRecord
from devbootstrap.core.models.tool import DeclaredSet, ToolDeclaration

logger = logging.getLogger(__name__)


class ToolState(str, Enum):
    UNKNOWN = "unknown"
    PLUGIN_CHECKED = "plugin_checked"
    PLUGIN_PRESENT = "plugin_present"
    PLUGIN_ADDED = "plugin_added"
    VERSION_CHECKED = "version_checked"
    VERSION_PRESENT = "version_present"
    VERSION_INSTALLED = "version_installed"
    SELECTED = "selected"
    FAILED = "failed"


@dataclass
class ToolOutcome:
    """Where one declaration ended up, and how it got there."""

    declaration: ToolDeclaration
    state: ToolState = ToolState.UNKNOWN
    history: list[ToolState] = field(default_factory=lambda: [ToolState.UNKNOWN])
    error: str = ""

    def advance(self, state: ToolState) -> None:
        self.state = state
        self.history.append(state)

    @property
    def failed(self) -> bool:
        return self.state is ToolState.FAILED

    @property
    def changed(self) -> bool:
        """Whether any mutating call was made for this tool."""
        return ToolState.PLUGIN_ADDED in self.history or ToolState.VERSION_INSTALLED in self.history


def reconcile_tool(manager: VersionManager, decl: ToolDeclaration) -> ToolOutcome:
    """Bring one versioned declaration to its target state."""
    if decl.version is None:
        raise ValueError(f"{decl.name} has no version; it cannot be managed by {manager.name}")

    outcome = ToolOutcome(declaration=decl)
    name, version = decl.name, decl.version

    # ── Plugin ──
    present = name in manager.plugins()
    outcome.advance(ToolState.PLUGIN_CHECKED)
    if present:
        logger.info("Plugin %s already installed", name)
        outcome.advance(ToolState.PLUGIN_PRESENT)
    else:
        logger.info("Adding %s plugin: %s", manager.name, name)
        r = manager.add_plugin(name)
        if not r.ok:
            logger.warning("Failed to add plugin: %s (%s)", name, r.summary)
            outcome.error = f"plugin add failed: {r.summary}"
            outcome.advance(ToolState.FAILED)
            return outcome
        outcome.advance(ToolState.PLUGIN_ADDED)

    # ── Version ──
    present = version in manager.installed_versions(name)
    outcome.advance(ToolState.VERSION_CHECKED)
    if present:
        logger.info("%s %s already installed", name, version)
        outcome.advance(ToolState.VERSION_PRESENT)
    else:
        logger.info("Installing %s %s...", name, version)
        r = manager.install(name, version)
        if not r.ok:
            logger.error("Failed to install %s %s (%s)", name, version, r.summary)
            outcome.error = f"install failed: {r.summary}"
            outcome.advance(ToolState.FAILED)
            return outcome
        outcome.advance(ToolState.VERSION_INSTALLED)

    # ── Selection (best-effort) ──
    r = manager.set_global(name, version)
    if r.ok:
        outcome.advance(ToolState.SELECTED)
    else:
        logger.warning("Could not set %s %s as global (%s)", name, version, r.summary)

    return outcome


def _reconcile_guarded(manager: VersionManager, decl: ToolDeclaration) -> ToolOutcome:
    """``reconcile_tool`` that turns an adapter crash into a FAILED outcome."""
    try:
        return reconcile_tool(manager, decl)
    except Exception as e:
        logger.exception("Reconciling %s raised", decl)
        outcome = ToolOutcome(declaration=decl, error=f"{type(e).__name__}: {e}")
        outcome.advance(ToolState.FAILED)
        return outcome


def reconcile_version_tools(
    manager: VersionManager,
    declared: DeclaredSet,
) -> tuple[StepRecord | None, list[ToolOutcome]]:
    """Reconcile every versioned declaration of a set.

    Unversioned declarations are skipped with a warning. Returns one
    aggregate ``StepRecord`` (None when there was nothing to do) and the
    per-tool outcomes.
    """
    for decl in declared.unversioned():
        logger.warning("Skipping %s: no version declared", decl.name)

    targets = declared.versioned()
    if not targets:
        logger.info("No versioned tools declared")
        return None, []

    outcomes = [_reconcile_guarded(manager, decl) for decl in targets]
    failed = [o.declaration.name for o in outcomes if o.failed]

    if failed:
        record = StepRecord.failure(
            f"Failed to install {manager.name} tools: {' '.join(failed)}",
            failed_items=failed,
            detail="; ".join(f"{o.declaration}: {o.error}" for o in outcomes if o.failed),
        )
    else:
        changed = sum(1 for o in outcomes if o.changed)
        record = StepRecord.success(
            f"All {manager.name} tools installed successfully",
            detail=f"{len(outcomes)} declared, {changed} changed",
        )
    return record, outcomes
