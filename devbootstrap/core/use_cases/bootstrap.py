"""
Bootstrap use case — reconcile this machine against the declared tools.

This is the top-level orchestrator. It detects the native backend
(the only step allowed to abort), then runs the fixed stage sequence
through the stage executor, finalizes the ledger and persists a
history record:

    detect → download configs → update index → essentials → Homebrew
    → asdf → version tools → utility packages → native packages
    → login shell → shell profiles → validate → finalize
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime

from devbootstrap.adapters.network.fetch import Fetcher, HttpFetcher
from devbootstrap.adapters.packages.homebrew import HomebrewAdapter
from devbootstrap.adapters.shell.command import CommandRunner
from devbootstrap.adapters.shell.profile import ProfileWriter
from devbootstrap.adapters.version_manager.asdf import AsdfAdapter
from devbootstrap.core.config.loader import load_all_configs
from devbootstrap.core.config.settings import Settings
from devbootstrap.core.engine.executor import RunContext, Stage, execute_stages
from devbootstrap.core.errors import UnsupportedHostError
from devbootstrap.core.models.ledger import LedgerReport, RunLedger, StepRecord
from devbootstrap.core.models.tool import DeclaredSet, ToolDeclaration
from devbootstrap.core.persistence.history import HistoryWriter, RunRecord, generate_run_id
from devbootstrap.core.services.detection import detect_backend
from devbootstrap.core.services.login_shell import set_default_shell
from devbootstrap.core.services.package_install import (
    install_native_packages,
    install_utility_packages,
    missing_packages,
)
from devbootstrap.core.services.profile_setup import (
    add_homebrew_to_profiles,
    configure_shell_profiles,
)
from devbootstrap.core.services.validation import validate_installation
from devbootstrap.core.services.version_tools import reconcile_version_tools

logger = logging.getLogger(__name__)


# ── Stages ──────────────────────────────────────────────────────────


def download_configs(ctx: RunContext) -> StepRecord:
    ctx.configs = load_all_configs(ctx.settings, ctx.fetcher)
    return StepRecord.success(
        "Configuration files download process completed",
        detail=f"{len(ctx.configs.fetched)}/{ctx.configs.attempted} fetched",
    )


def update_system(ctx: RunContext) -> StepRecord:
    r = ctx.backend.update_index()
    if r.ok:
        return StepRecord.success("System packages updated")
    return StepRecord.failure("Failed to update system packages", detail=r.summary)


def install_essentials(ctx: RunContext) -> StepRecord:
    essentials = DeclaredSet.from_declarations(
        (ToolDeclaration(name=p) for p in ctx.backend.essentials), source="essentials",
    )
    return install_native_packages(ctx.backend, essentials, label="essential packages")


def ensure_homebrew(ctx: RunContext) -> StepRecord:
    if ctx.homebrew.is_available():
        logger.info("Homebrew already installed, updating...")
        r = ctx.homebrew.update()
        if r.ok:
            return StepRecord.success("Homebrew updated")
        return StepRecord.failure("Failed to update Homebrew", detail=r.summary)

    logger.info("Installing Homebrew for system tools...")
    r = ctx.homebrew.bootstrap(ctx.fetcher, ctx.settings.cache_dir)
    if not r.ok:
        return StepRecord.failure("Failed to install Homebrew", detail=r.summary)
    add_homebrew_to_profiles(ctx.settings.home_dir, ctx.profiles)
    return StepRecord.success("Homebrew installed successfully")


def ensure_asdf(ctx: RunContext) -> StepRecord:
    if ctx.asdf.is_available():
        return StepRecord.success("asdf already installed")
    if not ctx.homebrew.is_available():
        return StepRecord.failure("Failed to install asdf", detail="Homebrew not available")

    asdf = DeclaredSet.from_declarations([ToolDeclaration(name="asdf")])
    if not missing_packages(ctx.homebrew, asdf):
        return StepRecord.success("asdf already installed")
    r = ctx.homebrew.install(["asdf"])
    if r.ok:
        return StepRecord.success("asdf installed successfully")
    return StepRecord.failure("Failed to install asdf", detail=r.summary)


def install_version_tools(ctx: RunContext) -> StepRecord | None:
    runtime = ctx.configs.runtime
    if runtime.versioned() and not ctx.asdf.is_available():
        return StepRecord.failure(
            "Failed to install asdf tools: asdf not available",
            failed_items=[d.name for d in runtime.versioned()],
        )
    record, _ = reconcile_version_tools(ctx.asdf, runtime)
    return record


def install_system_tools(ctx: RunContext) -> StepRecord | None:
    declared = ctx.configs.utility
    if not len(declared):
        return None
    if not ctx.homebrew.is_available():
        return StepRecord.failure(
            "Failed to install system tools: Homebrew not found in PATH",
            failed_items=declared.names,
        )
    return install_utility_packages(ctx.homebrew, declared)


def install_additional_packages(ctx: RunContext) -> StepRecord | None:
    declared = ctx.configs.native
    if declared is None or not len(declared):
        logger.info("No additional packages declared, skipping")
        return None
    return install_native_packages(ctx.backend, declared)


def change_login_shell(ctx: RunContext) -> StepRecord | None:
    return set_default_shell(ctx.runner)


def configure_shell(ctx: RunContext) -> StepRecord:
    return configure_shell_profiles(ctx.settings.home_dir, ctx.profiles)


def validate(ctx: RunContext) -> StepRecord:
    return validate_installation(ctx.runner, ctx.asdf, ctx.homebrew)


STAGES: tuple[Stage, ...] = (
    Stage("Download configuration files", download_configs),
    Stage("Update system packages", update_system),
    Stage("Install essential packages", install_essentials),
    Stage("Install Homebrew", ensure_homebrew),
    Stage("Install asdf", ensure_asdf),
    Stage("Install asdf tools", install_version_tools),
    Stage("Install system tools", install_system_tools),
    Stage("Install additional packages", install_additional_packages),
    Stage("Set default shell", change_login_shell),
    Stage("Configure shell", configure_shell),
    Stage("Validate installation", validate),
)


# ── Use case ────────────────────────────────────────────────────────


@dataclass
class BootstrapResult:
    """Result of a bootstrap run."""

    run_id: str = ""
    backend: str | None = None
    report: LedgerReport | None = None
    error: str | None = None           # fatal: unsupported host

    @property
    def exit_code(self) -> int:
        if self.error:
            return 2
        assert self.report is not None
        return self.report.exit_code

    def to_dict(self) -> dict:
        result: dict = {"run_id": self.run_id, "exit_code": self.exit_code}
        if self.error:
            result["error"] = self.error
            return result
        result["backend"] = self.backend
        if self.report:
            result["report"] = self.report.to_dict()
        return result


def run_bootstrap(
    settings: Settings,
    runner: CommandRunner | None = None,
    fetcher: Fetcher | None = None,
    history: HistoryWriter | None = None,
    stages: tuple[Stage, ...] = STAGES,
    platform_name: str | None = None,
) -> BootstrapResult:
    """Run the full reconciliation.

    Args:
        settings: Resolved settings.
        runner: Command runner (default: real subprocesses).
        fetcher: Network fetcher (default: HTTPS via urllib).
        history: History writer (default: ``settings.history_path``).
        stages: Stage sequence, overridable for tests.
        platform_name: Override for ``sys.platform``.

    Returns:
        BootstrapResult. ``error`` is set only for an unsupported host,
        in which case no ledger exists.
    """
    result = BootstrapResult(run_id=generate_run_id())
    started_at = datetime.now(UTC).isoformat()

    runner = runner or CommandRunner(use_sudo=settings.use_sudo)
    fetcher = fetcher or HttpFetcher()

    logger.info("Starting Linux development environment bootstrap...")
    try:
        backend = detect_backend(runner, platform_name=platform_name)
    except UnsupportedHostError as e:
        logger.error("%s", e)
        result.error = str(e)
        return result
    result.backend = backend.kind.value

    ledger = RunLedger()
    ledger.succeed(f"Detected Linux distribution: {backend.kind.distro}", detail=backend.name)

    context = RunContext(
        settings=settings,
        runner=runner,
        fetcher=fetcher,
        backend=backend,
        homebrew=HomebrewAdapter(runner),
        asdf=AsdfAdapter(runner),
    )
    execute_stages(stages, context, ledger)

    report = ledger.finalize()
    result.report = report

    history = history or HistoryWriter(settings.history_path)
    history.write(RunRecord.from_report(report, result.run_id, started_at, result.backend))

    if report.failed:
        logger.warning("Bootstrap completed with %d failures", len(report.failed))
    else:
        logger.info("Bootstrap completed successfully!")
    return result
