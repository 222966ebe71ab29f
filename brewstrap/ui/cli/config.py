"""
CLI commands for exported configurations.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click


@click.group()
def config() -> None:
    """Exported configuration — show what a replay would install."""


@config.command("show")
@click.option(
    "--dir", "directory",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Directory holding the export.",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def show(directory: Path, as_json: bool) -> None:
    """Load an exported configuration and print it."""
    from brewstrap.core.config.loader import load_exported
    from brewstrap.core.errors import ConfigError

    try:
        snapshot = load_exported(directory)
    except ConfigError as e:
        if as_json:
            click.echo(json.dumps({"error": str(e)}, indent=2))
        else:
            click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps({
            "settings": snapshot.settings.model_dump(mode="json", exclude={"shell_profile"}),
            "packages": snapshot.packages.to_dict(),
        }, indent=2))
        return

    settings = snapshot.settings
    click.secho("📋 Exported configuration", fg="cyan", bold=True)
    click.echo(f"   China mirror: {'yes' if settings.use_china_mirror else 'no'}")
    click.echo(f"   Android SDK:  {settings.android_sdk_path}")
    click.echo(f"   Gradle home:  {settings.gradle_home_path}")
    click.echo(f"   FVM home:     {settings.fvm_home_path}")
    click.echo(f"   JDK:          {snapshot.packages.jdk or '-'}")
    click.echo(f"   Formulas:     {', '.join(i.name for i in snapshot.packages.formulas) or '-'}")
    click.echo(f"   Casks:        {', '.join(i.name for i in snapshot.packages.casks) or '-'}")
