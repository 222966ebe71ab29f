"""
Configuration export/import — the round-trippable run snapshot.

An export is a settings file plus a companion ``Brewfile_export``:

    config_export.yml | config_export.sh | config_export.env
    Brewfile_export

Loading the pair gives back the same settings, package lists and JDK
selection without prompting. Writes are atomic (write to temp file,
then rename) so an interrupted export never leaves half a file.
"""

from __future__ import annotations

import logging
import re
import shlex
import tempfile
from dataclasses import dataclass
from pathlib import Path

import yaml

from brewstrap.core.config.brewfile import load_brewfile, render_brewfile
from brewstrap.core.errors import ConfigError
from brewstrap.core.models.intent import PackageKind
from brewstrap.core.models.settings import Settings
from brewstrap.core.services.package_set import PackageSet

logger = logging.getLogger(__name__)

BREWFILE_EXPORT = "Brewfile_export"

EXPORT_FILES = {
    "yaml": "config_export.yml",
    "shell": "config_export.sh",
    "env": "config_export.env",
}

# Settings field ↔ shell variable name
_SHELL_KEYS = {
    "use_china_mirror": "USE_CHINA_MIRROR",
    "android_sdk_path": "ANDROID_SDK_PATH",
    "gradle_home_path": "GRADLE_HOME_PATH",
    "fvm_home_path": "FVM_HOME_PATH",
    "jdk": "SELECTED_JDK_PACKAGE_NAME",
}

_ASSIGN_RE = re.compile(r"^([A-Z_][A-Z0-9_]*)=(.*)$")


@dataclass
class Snapshot:
    """Everything needed to replay a run without prompts."""

    settings: Settings
    packages: PackageSet


# ── Export ──────────────────────────────────────────────────────


def export_configuration(
    settings: Settings,
    packages: PackageSet,
    directory: Path,
    fmt: str = "yaml",
) -> list[Path]:
    """Write the settings file and ``Brewfile_export`` into ``directory``.

    Returns:
        Paths written, settings file first.

    Raises:
        ConfigError: Unknown format or write failure.
    """
    if fmt not in EXPORT_FILES:
        raise ConfigError(f"Unknown export format '{fmt}' (choose from {', '.join(EXPORT_FILES)})")

    settings = settings.model_copy(update={"jdk": packages.jdk or settings.jdk})
    render = {"yaml": _render_yaml, "shell": _render_shell, "env": _render_env}[fmt]

    settings_path = directory / EXPORT_FILES[fmt]
    brewfile_path = directory / BREWFILE_EXPORT
    try:
        _atomic_write(settings_path, render(settings, packages))
        _atomic_write(brewfile_path, render_brewfile(packages.intents))
    except OSError as e:
        raise ConfigError(f"Cannot write export to {directory}: {e}") from e

    logger.info("Exported configuration to %s and %s", settings_path, brewfile_path)
    return [settings_path, brewfile_path]


def _render_yaml(settings: Settings, packages: PackageSet) -> str:
    data = {
        "settings": {
            "use_china_mirror": settings.use_china_mirror,
            "jdk": settings.jdk,
        },
        "paths": {
            "android_sdk": settings.android_sdk_path,
            "gradle_home": settings.gradle_home_path,
            "fvm_home": settings.fvm_home_path,
        },
        "packages": {
            "formulas": [i.name for i in packages.formulas],
            "casks": [i.name for i in packages.casks],
        },
    }
    header = "# brewstrap exported config\n"
    return header + yaml.safe_dump(data, sort_keys=False, allow_unicode=True)


def _shell_assignments(settings: Settings) -> list[str]:
    lines = []
    for field_name, key in _SHELL_KEYS.items():
        value = getattr(settings, field_name)
        if isinstance(value, bool):
            lines.append(f"{key}={'true' if value else 'false'}")
        else:
            lines.append(f"{key}={shlex.quote(value or '')}")
    return lines


def _render_shell(settings: Settings, packages: PackageSet) -> str:
    lines = ["#!/bin/bash", "# brewstrap exported config", *_shell_assignments(settings)]
    return "\n".join(lines) + "\n"


def _render_env(settings: Settings, packages: PackageSet) -> str:
    formulas = " ".join(i.name for i in packages.formulas)
    casks = " ".join(i.name for i in packages.casks)
    lines = [
        "# brewstrap exported config",
        *_shell_assignments(settings),
        f'FORMULAS="{formulas}"',
        f'CASKS="{casks}"',
    ]
    return "\n".join(lines) + "\n"


def _atomic_write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}_", suffix=".tmp")
    tmp = Path(tmp_name)
    try:
        with open(fd, "w", encoding="utf-8") as f:
            f.write(content)
        tmp.replace(path)
    except Exception:
        tmp.unlink(missing_ok=True)
        raise


# ── Import ──────────────────────────────────────────────────────


def find_exported(directory: Path) -> tuple[Path, Path] | None:
    """Locate an exported settings file + Brewfile pair, if complete."""
    brewfile = directory / BREWFILE_EXPORT
    if not brewfile.is_file():
        return None
    for name in EXPORT_FILES.values():
        candidate = directory / name
        if candidate.is_file():
            return candidate, brewfile
    return None


def load_exported(directory: Path) -> Snapshot:
    """Load a previously exported configuration.

    Raises:
        ConfigError: If the pair is incomplete or unreadable.
    """
    pair = find_exported(directory)
    if pair is None:
        raise ConfigError(f"No exported configuration found in {directory}")
    settings_path, brewfile_path = pair

    if settings_path.suffix in (".yml", ".yaml"):
        settings = _load_yaml_settings(settings_path)
    else:
        settings = _load_shell_settings(settings_path)

    intents = load_brewfile(brewfile_path)
    formulas = tuple(sorted((i for i in intents if i.kind == PackageKind.FORMULA), key=lambda i: i.name))
    casks = tuple(sorted((i for i in intents if i.kind == PackageKind.CASK), key=lambda i: i.name))

    jdk = settings.jdk
    if not jdk:
        jdk = next((i.name for i in formulas if i.name.startswith("openjdk")), None)
        settings = settings.model_copy(update={"jdk": jdk})

    logger.info(
        "Loaded configuration from %s (%d formulas, %d casks)",
        settings_path, len(formulas), len(casks),
    )
    return Snapshot(settings=settings, packages=PackageSet(formulas=formulas, casks=casks, jdk=jdk))


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e


def _load_yaml_settings(path: Path) -> Settings:
    try:
        data = yaml.safe_load(_read(path)) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    section = data.get("settings") or {}
    paths = data.get("paths") or {}
    fields: dict = {}
    if "use_china_mirror" in section:
        fields["use_china_mirror"] = section["use_china_mirror"]
    if section.get("jdk"):
        fields["jdk"] = section["jdk"]
    for key, field_name in (
        ("android_sdk", "android_sdk_path"),
        ("gradle_home", "gradle_home_path"),
        ("fvm_home", "fvm_home_path"),
    ):
        if paths.get(key):
            fields[field_name] = str(Path(paths[key]).expanduser())

    try:
        return Settings.model_validate(fields)
    except Exception as e:
        raise ConfigError(f"Invalid settings in {path}: {e}") from e


def _load_shell_settings(path: Path) -> Settings:
    values: dict[str, str] = {}
    for raw in _read(path).splitlines():
        m = _ASSIGN_RE.match(raw.strip())
        if not m:
            continue
        key, value = m.groups()
        try:
            parts = shlex.split(value)
        except ValueError as e:
            raise ConfigError(f"Cannot parse {key} in {path}: {e}") from e
        values[key] = parts[0] if parts else ""

    fields: dict = {}
    for field_name, key in _SHELL_KEYS.items():
        if key not in values:
            continue
        value = values[key]
        if field_name == "use_china_mirror":
            fields[field_name] = value.lower() == "true"
        elif value:
            fields[field_name] = str(Path(value).expanduser()) if field_name.endswith("_path") else value

    try:
        return Settings.model_validate(fields)
    except Exception as e:
        raise ConfigError(f"Invalid settings in {path}: {e}") from e
