"""
Flat package installation — Homebrew utilities and native packages.

Every name is checked for presence before any install call; installed
names are only logged. The two backend families differ in batching:

- utility (Homebrew): one install call per missing package, so one bad
  formula fails alone;
- native (apt/yum/dnf/pacman): one install call for all missing
  packages, so one bad name fails the whole batch.

Either way a set produces exactly one ``StepRecord``.
"""

from __future__ import annotations

import logging

from devbootstrap.adapters.base import NativeBackend, PackageManager
from devbootstrap.core.models.ledger import StepRecord
from devbootstrap.core.models.tool import DeclaredSet

logger = logging.getLogger(__name__)


def missing_packages(manager: PackageManager, declared: DeclaredSet) -> list[str]:
    """Names from ``declared`` that ``manager`` does not have yet."""
    missing = []
    for name in declared.names:
        if manager.is_installed(name):
            logger.info("%s already installed", name)
        else:
            missing.append(name)
    return missing


def install_utility_packages(
    manager: PackageManager,
    declared: DeclaredSet,
    label: str = "system tools",
) -> StepRecord:
    """Install missing packages one at a time.

    A package whose check or install raises is recorded as failed; the
    remaining packages are still processed.
    """
    failed: list[str] = []
    errors: list[str] = []
    installed = 0

    for name in declared.names:
        try:
            if manager.is_installed(name):
                logger.info("%s already installed", name)
                continue
            logger.info("Installing %s...", name)
            r = manager.install([name])
        except Exception as e:
            logger.exception("Installing %s raised", name)
            failed.append(name)
            errors.append(f"{name}: {type(e).__name__}: {e}")
            continue
        if r.ok:
            logger.info("Installed %s", name)
            installed += 1
        else:
            logger.error("Failed to install %s (%s)", name, r.summary)
            failed.append(name)
            errors.append(f"{name}: {r.summary}")

    if failed:
        return StepRecord.failure(
            f"Failed to install {label}: {' '.join(failed)}",
            failed_items=failed,
            detail="; ".join(errors),
        )
    return StepRecord.success(
        f"All {label} installed successfully",
        detail=f"{len(declared)} declared, {installed} installed",
    )


def install_native_packages(
    backend: NativeBackend,
    declared: DeclaredSet,
    label: str = "additional system packages",
) -> StepRecord:
    """Install all missing packages in a single backend call."""
    missing = missing_packages(backend, declared)
    if not missing:
        return StepRecord.success(
            f"All {label} already installed",
            detail=f"{len(declared)} declared, 0 installed",
        )

    logger.info("Installing %d package(s) via %s: %s", len(missing), backend.name, " ".join(missing))
    r = backend.install(missing)
    if not r.ok:
        logger.error("Batch install via %s failed (%s)", backend.name, r.summary)
        return StepRecord.failure(
            f"Failed to install {label}: {' '.join(missing)}",
            failed_items=missing,
            detail=r.summary,
        )
    return StepRecord.success(
        f"{label.capitalize()} installed",
        detail=f"{len(declared)} declared, {len(missing)} installed",
    )
