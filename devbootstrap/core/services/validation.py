"""
Post-run validation — read-only report of what is on PATH now.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from devbootstrap.adapters.packages.homebrew import HomebrewAdapter
from devbootstrap.adapters.shell.command import CommandRunner
from devbootstrap.adapters.version_manager.asdf import AsdfAdapter
from devbootstrap.core.models.ledger import StepRecord

logger = logging.getLogger(__name__)


@dataclass
class ValidationReport:
    found: dict[str, str] = field(default_factory=dict)
    missing: list[str] = field(default_factory=list)


def collect_versions(
    runner: CommandRunner,
    asdf: AsdfAdapter,
    homebrew: HomebrewAdapter,
) -> ValidationReport:
    report = ValidationReport()

    asdf_version = asdf.version() if asdf.is_available() else None
    brew_version = homebrew.version() if homebrew.is_available() else None

    git_version = None
    if runner.which("git"):
        r = runner.run(["git", "--version"])
        git_version = r.stdout.strip() if r.ok else None

    for tool, version in (("asdf", asdf_version), ("Homebrew", brew_version), ("Git", git_version)):
        if version:
            report.found[tool] = version
            logger.info("%s: %s", tool, version)
        else:
            report.missing.append(tool)
            logger.warning("%s not found in PATH", tool)
    return report


def validate_installation(
    runner: CommandRunner,
    asdf: AsdfAdapter,
    homebrew: HomebrewAdapter,
) -> StepRecord:
    """Log the versions of the core tools. Never mutates anything."""
    logger.info("Validating installation...")
    report = collect_versions(runner, asdf, homebrew)
    detail = ", ".join(f"{k}: {v}" for k, v in report.found.items())
    if report.missing:
        detail = f"{detail}; not on PATH: {', '.join(report.missing)}".lstrip("; ")
    return StepRecord.success("Installation validated", detail=detail)
