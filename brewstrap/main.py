"""
brewstrap — CLI entrypoint.

Usage:
    brewstrap --help
    brewstrap run
    brewstrap plan --export yaml
    brewstrap health git node --jdk openjdk@17
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

import click

from brewstrap import __version__
from brewstrap.adapters.brew import HomebrewAdapter
from brewstrap.core.config.loader import EXPORT_FILES
from brewstrap.core.engine.executor import RetryingExecutor
from brewstrap.core.observability.logging_config import setup_logging
from brewstrap.core.observability.run_log import close_run_log, open_run_log

logger = logging.getLogger(__name__)

EXPORT_FORMATS = tuple(EXPORT_FILES)


@click.group()
@click.version_option(version=__version__, prog_name="brewstrap")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool, debug: bool) -> None:
    """brewstrap — bootstrap a macOS development environment with Homebrew."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("BREWSTRAP_LOG_LEVEL", "WARNING")

    setup_logging(level=level)


def _abort(message: str, log_path: Path | None = None) -> None:
    click.secho(f"❌ {message}", fg="red")
    if log_path:
        click.echo(f"   Details: {log_path}")
    sys.exit(1)


def _export(settings, packages, directory: Path, fmt: str) -> None:
    from brewstrap.core.config.loader import export_configuration
    from brewstrap.core.errors import ConfigError

    try:
        paths = export_configuration(settings, packages, directory, fmt=fmt)
    except ConfigError as e:
        click.secho(f"⚠️  Export failed: {e}", fg="yellow")
        return
    click.secho("✔ Configuration exported:", fg="green")
    for path in paths:
        click.echo(f"  - {path}")


def _reload_shell(profile: Path | None) -> None:
    click.secho(f"\nAll configuration was written to {profile}.", fg="yellow")
    if not click.confirm("Reload the shell now to apply the changes?", default=True):
        logger.info("User chose not to reload the shell")
        click.secho(f"Run 'source {profile}' or open a new terminal to apply them.", fg="yellow")
        return
    shell = os.environ.get("SHELL", "/bin/zsh")
    logger.info("Reloading shell: exec %s -l", shell)
    close_run_log()
    os.execvp(shell, [shell, "-l"])


# ── run ─────────────────────────────────────────────────────────


@cli.command()
@click.option(
    "--brewfile",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path("Brewfile"),
    show_default=True,
    help="External package list to offer.",
)
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Where exported configurations are read from and written to.",
)
@click.option("--export", "export_fmt", type=click.Choice(EXPORT_FORMATS), default=None,
              help="Export the configuration before executing.")
@click.option("--yes", "-y", "assume_yes", is_flag=True,
              help="Execute without confirmation and accept the bulk retry.")
@click.option("--skip-preflight", is_flag=True, help="Skip the macOS / Xcode CLT checks.")
@click.option("--skip-bootstrap", is_flag=True, help="Assume Homebrew is installed and current.")
@click.option("--no-reload", is_flag=True, help="Don't offer to reload the shell at the end.")
def run(
    brewfile: Path,
    config_dir: Path,
    export_fmt: str | None,
    assume_yes: bool,
    skip_preflight: bool,
    skip_bootstrap: bool,
    no_reload: bool,
) -> None:
    """Select packages, install them, configure the shell, verify."""
    from brewstrap.core.config.loader import find_exported, load_exported
    from brewstrap.core.context import RunContext
    from brewstrap.core.errors import BrewstrapError
    from brewstrap.core.models.settings import Settings
    from brewstrap.core.services.preflight import detect_shell_profile, run_preflight
    from brewstrap.core.use_cases.run import apply_plan
    from brewstrap.ui.cli.prompts import (
        collect_plan,
        confirm_bulk_retry,
        confirm_execution,
    )
    from brewstrap.ui.cli.summary import render_plan, render_summary

    log_path = open_run_log()
    logger.info("======== brewstrap %s starting ========", __version__)
    click.secho(f"✔ Run log: {log_path}", fg="green")

    try:
        if not skip_preflight:
            run_preflight()

        run_ctx = RunContext(log_path=log_path, profile=detect_shell_profile())
        manager = HomebrewAdapter()
        executor = RetryingExecutor()

        # ── Plan phase ───────────────────────────────────────────
        loaded = False
        if find_exported(config_dir):
            click.secho("✔ Found an exported configuration.", fg="green")
            if click.confirm("Load it and skip the selection steps?", default=True):
                snapshot = load_exported(config_dir)
                run_ctx.settings, run_ctx.packages = snapshot.settings, snapshot.packages
                loaded = True
        if not loaded:
            run_ctx.settings, run_ctx.packages = collect_plan(
                Settings(), manager, brewfile=brewfile, executor=executor,
            )
        run_ctx.settings = run_ctx.settings.model_copy(
            update={"shell_profile": str(run_ctx.profile)},
        )

        render_plan(run_ctx)
        if run_ctx.packages.is_empty:
            logger.info("No packages to install, exiting")
            click.secho("Nothing selected, nothing to do.", fg="yellow")
            return

        if export_fmt:
            _export(run_ctx.settings, run_ctx.packages, config_dir, export_fmt)
        if not assume_yes:
            choice = confirm_execution()
            if choice == "q":
                logger.info("User cancelled execution")
                click.secho("Cancelled.", fg="yellow")
                return
            if choice == "s":
                fmt = click.prompt("Export format", type=click.Choice(EXPORT_FORMATS), default="yaml")
                _export(run_ctx.settings, run_ctx.packages, config_dir, fmt)

        # ── Apply phase ──────────────────────────────────────────
        click.secho("\n🚀 Installing...", fg="yellow")
        apply_plan(
            run_ctx,
            manager,
            executor,
            confirm_retry=(lambda failures: True) if assume_yes else confirm_bulk_retry,
            bootstrap=not skip_bootstrap,
        )
        render_summary(run_ctx)
        logger.info("======== brewstrap finished ========")

        if not (no_reload or assume_yes):
            _reload_shell(run_ctx.profile)
    except BrewstrapError as e:
        logger.error("Aborted: %s", e)
        _abort(str(e), log_path)
    finally:
        close_run_log()


# ── plan ────────────────────────────────────────────────────────


@cli.command()
@click.option(
    "--brewfile",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path("Brewfile"),
    show_default=True,
    help="External package list to offer.",
)
@click.option("--export", "export_fmt", type=click.Choice(EXPORT_FORMATS), default=None,
              help="Export the collected configuration.")
@click.option(
    "--dir", "export_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Export directory.",
)
def plan(brewfile: Path, export_fmt: str | None, export_dir: Path) -> None:
    """Collect a plan interactively and show it, without installing."""
    from brewstrap.core.context import RunContext
    from brewstrap.core.errors import ConfigError
    from brewstrap.core.models.settings import Settings
    from brewstrap.ui.cli.prompts import collect_plan
    from brewstrap.ui.cli.summary import render_plan

    try:
        settings, packages = collect_plan(Settings(), HomebrewAdapter(), brewfile=brewfile)
    except ConfigError as e:
        _abort(str(e))
        return

    render_plan(RunContext(settings=settings, packages=packages))
    if packages.is_empty:
        click.secho("Nothing selected, nothing to do.", fg="yellow")
        return
    if export_fmt:
        _export(settings, packages, export_dir, export_fmt)


# ── Register command groups ─────────────────────────────────────

from brewstrap.ui.cli.config import config  # noqa: E402
from brewstrap.ui.cli.health import health  # noqa: E402

cli.add_command(config)
cli.add_command(health)


if __name__ == "__main__":
    cli()
