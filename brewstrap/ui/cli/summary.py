"""
Plan and summary rendering for the terminal.
"""

from __future__ import annotations

import click

from brewstrap.core.context import RunContext
from brewstrap.core.services.health import HealthReport


def render_plan(ctx: RunContext) -> None:
    """Print the execution plan collected in the plan phase."""
    packages = ctx.packages
    click.secho("\n==================== Execution plan ====================", fg="green")
    source = "China mirror" if ctx.settings.use_china_mirror else "official"
    click.echo(f"  - Homebrew source: {source}")
    if ctx.profile:
        click.echo(f"  - Shell profile: {ctx.profile}")
    if packages.jdk:
        click.echo(f"  - JDK: {packages.jdk}")
    if packages.formulas:
        click.secho("  - Command-line tools:", fg="cyan")
        for intent in packages.formulas:
            click.echo(f"    - {intent.name}")
    if packages.casks:
        click.secho("  - Applications:", fg="cyan")
        for intent in packages.casks:
            click.echo(f"    - {intent.name}")
    click.secho("========================================================", fg="green")


def render_health(report: HealthReport) -> None:
    if not report.results:
        return
    click.secho("Health checks:", fg="cyan")
    for result in report.results:
        icon = "✅" if result.ok else "❌"
        click.echo(f"  {icon} {result.tool}: {result.detail}")


def render_summary(ctx: RunContext) -> None:
    """Every intent outcome, environment section and health result."""
    click.secho("\n==================== Summary ====================", fg="yellow")

    if ctx.report:
        successes = ctx.report.successes
        failures = ctx.report.failures
        if successes:
            click.secho("✔ Installed / already present:", fg="green")
            for outcome in successes:
                suffix = " (after retry)" if outcome.retried else ""
                click.echo(f"  - {outcome.label}{suffix}")
        if failures:
            click.secho("✘ Failed:", fg="red")
            for outcome in failures:
                click.echo(f"  - {outcome.label}")

    if ctx.environment_error:
        click.secho(f"⚠️  Environment not configured: {ctx.environment_error}", fg="red")
    elif ctx.environment:
        click.secho("Environment:", fg="cyan")
        for result in ctx.environment:
            icon = "✅" if result.ok else "❌"
            click.echo(f"  {icon} {result.section}: {result.detail}")

    if ctx.health:
        render_health(ctx.health)

    if ctx.log_path:
        click.echo(f"\nFull log: {ctx.log_path}")
    click.secho("=================================================", fg="yellow")
