"""
Interactive prompts — the plan phase of a run.

Everything here only *collects*: it asks questions and returns data
(Settings, PackageSet). The one exception is the mirror reachability
probe, which is read-only. Installs and file writes belong to the
apply phase.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

import click

from brewstrap.adapters.base import PackageManager
from brewstrap.adapters.brew import probe_command
from brewstrap.core.config.brewfile import load_brewfile
from brewstrap.core.engine.executor import RetryingExecutor
from brewstrap.core.models.intent import PackageKind
from brewstrap.core.models.outcome import Outcome
from brewstrap.core.models.settings import Settings
from brewstrap.core.services.catalog import CATALOG, JDK_CHOICES
from brewstrap.core.services.package_set import PackageSet, PackageSetBuilder

logger = logging.getLogger(__name__)


# ── Generic menus ───────────────────────────────────────────────


def select_many(title: str, values: Sequence[str], labels: Sequence[str] | None = None) -> list[str]:
    """Numbered multi-select. Enter on an empty line selects nothing."""
    if not values:
        return []
    labels = labels or values

    click.secho(f"\n{title}", fg="yellow")
    for i, label in enumerate(labels, start=1):
        click.echo(f"  [{i}] {label}")

    while True:
        raw = click.prompt(
            "Numbers to install (space separated, Enter to skip)",
            default="",
            show_default=False,
        )
        choices = raw.split()
        if not choices:
            return []
        bad = [c for c in choices if not c.isdigit() or not 1 <= int(c) <= len(values)]
        if bad:
            click.secho(f"Invalid choice '{bad[0]}', please try again.", fg="red")
            continue
        picked = [values[int(c) - 1] for c in dict.fromkeys(choices)]
        logger.info("User selected packages: %s", " ".join(picked))
        return picked


def select_one(
    title: str,
    labels: Sequence[str],
    default: int | None = None,
    colors: Sequence[str | None] | None = None,
) -> int:
    """Numbered single-select. Returns a 0-based index."""
    click.secho(f"\n{title}", fg="yellow")
    for i, label in enumerate(labels, start=1):
        fg = colors[i - 1] if colors and i <= len(colors) else None
        click.secho(f"  [{i}] {label}", fg=fg)
    choice = click.prompt("Option", type=click.IntRange(1, len(labels)), default=default)
    return choice - 1


# ── Settings ────────────────────────────────────────────────────


def prompt_custom_paths(settings: Settings) -> Settings:
    """Optionally override the SDK locations."""
    click.secho("\nSDK locations", fg="cyan")
    if not click.confirm("Customize SDK paths?", default=False):
        logger.info("User chose default paths")
        return settings

    updates = {}
    for field_name, label in (
        ("android_sdk_path", "Android SDK path"),
        ("gradle_home_path", "Gradle home path"),
        ("fvm_home_path", "FVM home path"),
    ):
        current = getattr(settings, field_name)
        value = click.prompt(label, default=current)
        updates[field_name] = str(Path(value).expanduser())

    settings = settings.model_copy(update=updates)
    logger.info(
        "Custom paths configured: ANDROID_SDK_PATH=%s, GRADLE_HOME_PATH=%s, FVM_HOME_PATH=%s",
        settings.android_sdk_path, settings.gradle_home_path, settings.fvm_home_path,
    )
    return settings


def prompt_mirror(settings: Settings, executor: RetryingExecutor | None = None) -> Settings:
    """Choose between the official Homebrew source and the China mirror.

    With an executor, the official source is probed first and the
    default answer follows the result.
    """
    click.secho("\nHomebrew source", fg="cyan")
    reachable = True
    if executor is not None:
        reachable = executor.execute("Checking access to the official source", 1, probe_command()) == 0

    if reachable:
        use_mirror = click.confirm("Use the China mirror anyway?", default=False)
    else:
        use_mirror = click.confirm(
            "The official source timed out. Use the China mirror (recommended)?",
            default=True,
        )
    logger.info("Homebrew mirror selection: USE_CHINA_MIRROR=%s", use_mirror)
    return settings.model_copy(update={"use_china_mirror": use_mirror})


# ── Packages ────────────────────────────────────────────────────


def prompt_jdk() -> str | None:
    """JDK version sub-flow. None means the user backed out."""
    labels = [label for label, _ in JDK_CHOICES] + ["Enter another Homebrew formula", "Back"]
    index = select_one("Which JDK should be installed?", labels)

    if index < len(JDK_CHOICES):
        jdk = JDK_CHOICES[index][1]
    elif index == len(JDK_CHOICES):
        jdk = click.prompt("Full Homebrew formula (e.g. openjdk@18)", default="", show_default=False).strip()
    else:
        jdk = ""

    if jdk:
        click.secho(f"Selected JDK: {jdk}", fg="green")
    return jdk or None


def prompt_brewfile(builder: PackageSetBuilder, path: Path) -> None:
    """Offer the entries of a Brewfile: all, a selection, or none."""
    click.secho("\nBrewfile", fg="cyan")
    if not path.is_file():
        logger.info("Brewfile not found at %s", path)
        click.secho(f"No Brewfile at {path}, skipping.", fg="yellow")
        return

    intents = load_brewfile(path)
    click.secho(f"Found {path} ({len(intents)} entries).", fg="green")
    mode = click.prompt(
        "[A]ll, [S]elect, [I]gnore",
        type=click.Choice(["a", "s", "i"], case_sensitive=False),
        default="a",
    ).lower()

    if mode == "i":
        logger.info("User chose to ignore the Brewfile")
        return
    if mode == "a":
        logger.info("User chose to install everything from the Brewfile")
        builder.add_brewfile(intents)
        return

    logger.info("User chose to select from the Brewfile")
    for kind, title in (
        (PackageKind.FORMULA, "Command-line tools from the Brewfile:"),
        (PackageKind.CASK, "Applications from the Brewfile:"),
    ):
        of_kind = [i for i in intents if i.kind == kind]
        picked = set(select_many(title, [i.name for i in of_kind]))
        builder.add_brewfile(i for i in of_kind if i.name in picked)


def prompt_catalog(builder: PackageSetBuilder) -> None:
    """Category loop over the built-in catalog until the user is done."""
    click.secho("\nBuilt-in catalog", fg="cyan")
    labels = [c.label for c in CATALOG] + ["Done, show the plan"]
    colors = [c.color for c in CATALOG]
    while True:
        index = select_one("Pick a category:", labels, colors=colors)
        if index == len(CATALOG):
            return
        category = CATALOG[index]
        logger.info("User selected category: %s", category.label)
        names = select_many(
            f"{category.label}:",
            category.names,
            [e.label for e in category.entries],
        )
        builder.add_catalog_selection(category, names)


def prompt_adhoc(builder: PackageSetBuilder, manager: PackageManager) -> None:
    """Extra packages by name, each checked with the package manager."""
    if not click.confirm("\nAdd other packages by name?", default=False):
        return
    while True:
        name = click.prompt("Package name (Enter to finish)", default="", show_default=False).strip()
        if not name:
            return
        kind = click.prompt(
            "Kind",
            type=click.Choice([k.value for k in PackageKind]),
            default=PackageKind.FORMULA.value,
        )
        if builder.add_adhoc(name, PackageKind(kind), manager):
            click.secho(f"  ✓ {name} added", fg="green")
        else:
            click.secho(f"  ✗ '{name}' is not a known package, discarded", fg="red")


def collect_plan(
    settings: Settings,
    manager: PackageManager,
    *,
    brewfile: Path,
    executor: RetryingExecutor | None = None,
) -> tuple[Settings, PackageSet]:
    """Full plan phase: settings questions, then every package source."""
    settings = prompt_custom_paths(settings)
    settings = prompt_mirror(settings, executor)

    builder = PackageSetBuilder(jdk_resolver=prompt_jdk)
    prompt_brewfile(builder, brewfile)
    prompt_catalog(builder)
    prompt_adhoc(builder, manager)

    packages = builder.build()
    settings = settings.model_copy(update={"jdk": packages.jdk})
    return settings, packages


# ── Apply-phase questions ───────────────────────────────────────


def confirm_bulk_retry(failures: list[Outcome]) -> bool:
    """The single bulk-retry offer."""
    names = ", ".join(o.intent.name for o in failures)
    click.secho(f"\n{len(failures)} package(s) failed: {names}", fg="red")
    return click.confirm("Retry them once now?", default=True)


def confirm_execution() -> str:
    """Returns 'e' (execute), 's' (save config, then execute) or 'q'."""
    return click.prompt(
        "[E]xecute, [S]ave config and execute, [Q]uit",
        type=click.Choice(["e", "s", "q"], case_sensitive=False),
        default="e",
    ).lower()
