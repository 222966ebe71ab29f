"""
CLI command for post-install health checks.

Thin wrapper over ``brewstrap.core.services.health``.
"""

from __future__ import annotations

import json
import sys

import click


@click.command()
@click.argument("packages", nargs=-1)
@click.option("--jdk", default=None, help="JDK formula to verify (e.g. openjdk@17).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def health(packages: tuple[str, ...], jdk: str | None, as_json: bool) -> None:
    """Smoke-test the tools implied by PACKAGES."""
    from brewstrap.core.engine.executor import RetryingExecutor
    from brewstrap.core.services import health as health_service
    from brewstrap.core.services.preflight import detect_shell_profile
    from brewstrap.ui.cli.summary import render_health

    profile = detect_shell_profile()
    executor = RetryingExecutor(display=not as_json)
    report = health_service.check(packages, jdk, executor, profile=profile)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
    elif not report.results:
        click.secho("⚠️  Nothing to check for the given packages", fg="yellow")
    else:
        render_health(report)

    if report.status in ("degraded", "unhealthy"):
        sys.exit(1)
