"""
devbootstrap — CLI entrypoint.

Usage:
    python -m devbootstrap.main --help
    python -m devbootstrap.main run
    python -m devbootstrap.main detect
    python -m devbootstrap.main parse config/asdf_languages_config.txt
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from devbootstrap import __version__
from devbootstrap.core.errors import ConfigError
from devbootstrap.core.models.ledger import LedgerReport
from devbootstrap.core.observability.logging_config import (
    ENV_FILE,
    ENV_FILE_LEVEL,
    resolve_level,
    setup_logging,
)


@click.group()
@click.version_option(version=__version__, prog_name="devbootstrap")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Only show warnings and errors.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--settings",
    "-s",
    "settings_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to bootstrap.yml (default: ./bootstrap.yml if present).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    settings_path: str | None,
) -> None:
    """devbootstrap — converge this machine to the declared dev tools."""
    ctx.ensure_object(dict)
    ctx.obj["settings_path"] = Path(settings_path) if settings_path else None

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(ENV_FILE),
        log_file_level=os.environ.get(ENV_FILE_LEVEL),
    )


def _load_settings(ctx: click.Context, **overrides):
    from devbootstrap.core.config.settings import load_settings

    try:
        return load_settings(ctx.obj.get("settings_path"), overrides=overrides)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)


def _print_report(report: LedgerReport) -> None:
    click.echo()
    click.secho("=========================================", fg="blue")
    click.secho("           INSTALLATION SUMMARY", fg="blue", bold=True)
    click.secho("=========================================", fg="blue")

    if report.succeeded:
        click.echo()
        click.secho(f"✅ SUCCESSFUL STEPS ({len(report.succeeded)}):", fg="green", bold=True)
        for entry in report.succeeded:
            click.secho("  ✓ ", fg="green", nl=False)
            click.echo(entry.label)

    if report.failed:
        click.echo()
        click.secho(f"❌ FAILED STEPS ({len(report.failed)}):", fg="red", bold=True)
        for entry in report.failed:
            click.secho("  ✗ ", fg="red", nl=False)
            click.echo(entry.label)
            if entry.detail:
                click.echo(f"     │ {entry.detail}")
        click.echo()
        click.secho("Some installations failed. Re-run to retry; completed steps are skipped.", fg="yellow")
    else:
        click.echo()
        click.secho("🎉 All installations completed successfully!", fg="green")

    click.echo()


@cli.command()
@click.option("--base-url", default=None, help="Remote base URL for config files (overrides CONFIG_BASE_URL).")
@click.option("--cache-dir", type=click.Path(file_okay=False), default=None, help="Download cache directory.")
@click.option("--no-sudo", is_flag=True, help="Never prefix commands with sudo.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output the report as JSON.")
@click.pass_context
def run(
    ctx: click.Context,
    base_url: str | None,
    cache_dir: str | None,
    no_sudo: bool,
    as_json: bool,
) -> None:
    """Reconcile this machine against the declared tools.

    Exit code 0 when every step succeeded, 1 when any step failed,
    2 when the host is unsupported.
    """
    from devbootstrap.core.use_cases.bootstrap import run_bootstrap

    settings = _load_settings(
        ctx,
        base_url=base_url,
        cache_dir=cache_dir,
        use_sudo=False if no_sudo else None,
    )
    result = run_bootstrap(settings)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(result.exit_code)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(result.exit_code)

    assert result.report is not None
    _print_report(result.report)
    sys.exit(result.exit_code)


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def detect(as_json: bool) -> None:
    """Show which native package manager would be used."""
    from devbootstrap.adapters.shell.command import CommandRunner
    from devbootstrap.core.errors import UnsupportedHostError
    from devbootstrap.core.services.detection import detect_backend

    try:
        backend = detect_backend(CommandRunner())
    except UnsupportedHostError as e:
        if as_json:
            click.echo(json.dumps({"error": str(e)}))
        else:
            click.secho(f"❌ {e}", fg="red")
        sys.exit(2)

    if as_json:
        click.echo(json.dumps({"backend": backend.kind.value, "executable": backend.name}))
        return
    click.secho(f"🔍 {backend.kind.value}", fg="cyan", bold=True, nl=False)
    click.echo(f"  ({backend.name})")


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--flat", is_flag=True, help="Parse as a flat package list.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def parse(file: str, flat: bool, as_json: bool) -> None:
    """Show the declarations parsed from FILE."""
    from devbootstrap.core.config.parser import parse_declarations, parse_package_names

    text = Path(file).read_text(encoding="utf-8")
    declared = (parse_package_names if flat else parse_declarations)(text, source=file)

    if as_json:
        click.echo(json.dumps(declared.model_dump(mode="json"), indent=2))
        return

    click.secho(f"📋 {file}: {len(declared)} declaration(s)", fg="cyan", bold=True)
    for decl in declared.declarations:
        version = decl.version or "-"
        click.echo(f"   • {decl.name:<20} {version}")


@cli.command()
@click.option("--limit", "-n", default=10, type=int, help="Number of runs to show.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def history(ctx: click.Context, limit: int, as_json: bool) -> None:
    """Show recent bootstrap runs."""
    from devbootstrap.core.persistence.history import HistoryWriter

    settings = _load_settings(ctx)
    records = HistoryWriter(settings.history_path).read_recent(limit)

    if as_json:
        click.echo(json.dumps([r.model_dump(mode="json") for r in records], indent=2))
        return

    if not records:
        click.echo("No runs recorded yet.")
        return

    status_color = {"ok": "green", "partial": "yellow", "failed": "red"}
    for record in records:
        click.secho(f"{record.status:<8}", fg=status_color.get(record.status, "white"), nl=False)
        click.echo(
            f" {record.run_id}  {record.backend}  "
            f"{record.steps_succeeded}/{record.steps_total} ok"
        )
        for label in record.failed_steps:
            click.echo(f"         ✗ {label}")


if __name__ == "__main__":
    cli()
