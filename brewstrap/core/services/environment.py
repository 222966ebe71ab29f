"""
Environment configuration — which profile sections a run needs.

Sections are decided from what was selected *or* is already installed,
then written through the profile writer. Each section stands alone:
a section that cannot be resolved or written is reported as failed
and the others still go ahead. Only an unusable profile file fails the
whole phase (``ProfileError`` from the writer).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

from brewstrap.adapters.base import PackageManager
from brewstrap.core.models.intent import PackageKind
from brewstrap.core.models.settings import Settings
from brewstrap.core.services.profile_writer import ProfileWriter, section_header

logger = logging.getLogger(__name__)


class SectionUnavailable(Exception):
    """A section applies but its values cannot be resolved."""


@dataclass(frozen=True)
class ProfileSection:
    """A named block of profile lines."""

    name: str
    lines: tuple[str, ...]


@dataclass
class SectionResult:
    """What happened to one section."""

    section: str
    ok: bool
    written: int = 0
    detail: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "section": self.section,
            "ok": self.ok,
            "written": self.written,
            "detail": self.detail,
        }


# ── Line builders ───────────────────────────────────────────────


def export_line(name: str, value: str) -> str:
    return f'export {name}="{value}"'


def path_line(entry: str, *, append: bool = False) -> str:
    if append:
        return f'export PATH="$PATH:{entry}"'
    return f'export PATH="{entry}:$PATH"'


def alias_line(name: str, value: str) -> str:
    return f"alias {name}='{value}'"


# ── Section planning ────────────────────────────────────────────


@dataclass
class _Inventory:
    """Selected names plus lazily listed installed inventories."""

    manager: PackageManager
    selected: set[str]
    _installed: dict[PackageKind, set[str]] = field(default_factory=dict)

    def installed(self, kind: PackageKind) -> set[str]:
        if kind not in self._installed:
            self._installed[kind] = self.manager.list_installed(kind)
        return self._installed[kind]

    def wants(self, name: str, kind: PackageKind) -> bool:
        return name in self.selected or name in self.installed(kind)


def _java(inv: _Inventory, settings: Settings, jdk: str | None) -> ProfileSection | None:
    candidates = sorted(n for n in inv.selected if n.startswith("openjdk"))
    if not jdk and not candidates:
        candidates = sorted(n for n in inv.installed(PackageKind.FORMULA) if n.startswith("openjdk"))
    jdk = jdk or (candidates[0] if candidates else None)
    if not jdk:
        return None

    prefix = inv.manager.prefix(jdk)
    if not prefix:
        raise SectionUnavailable(f"cannot resolve install prefix of {jdk}")
    return ProfileSection(
        "Java",
        (export_line("JAVA_HOME", prefix), path_line("$JAVA_HOME/bin")),
    )


def _android(inv: _Inventory, settings: Settings, jdk: str | None) -> ProfileSection | None:
    if not inv.wants("android-studio", PackageKind.CASK):
        return None
    return ProfileSection(
        "Android SDK",
        (
            export_line("ANDROID_HOME", settings.android_sdk_path),
            path_line("$ANDROID_HOME/platform-tools", append=True),
            path_line("$ANDROID_HOME/tools", append=True),
            path_line("$ANDROID_HOME/tools/bin", append=True),
        ),
    )


def _gradle(inv: _Inventory, settings: Settings, jdk: str | None) -> ProfileSection | None:
    if not inv.wants("gradle", PackageKind.FORMULA):
        return None
    return ProfileSection("Gradle", (export_line("GRADLE_USER_HOME", settings.gradle_home_path),))


def _fvm(inv: _Inventory, settings: Settings, jdk: str | None) -> ProfileSection | None:
    if not inv.wants("fvm", PackageKind.FORMULA):
        return None
    return ProfileSection(
        "FVM (Flutter Version Management)",
        (
            export_line("FVM_HOME", settings.fvm_home_path),
            path_line("$FVM_HOME/bin"),
            alias_line("flutter", "fvm flutter"),
        ),
    )


_SECTION_BUILDERS = (
    ("Java", _java),
    ("Android SDK", _android),
    ("Gradle", _gradle),
    ("FVM (Flutter Version Management)", _fvm),
)


def configure_environment(
    profile: Path,
    selected: Iterable[str],
    settings: Settings,
    manager: PackageManager,
    jdk: str | None = None,
) -> list[SectionResult]:
    """Write every applicable section into ``profile``.

    Raises:
        ProfileError: If the profile file itself is unusable.
    """
    writer = ProfileWriter(profile)
    inv = _Inventory(manager=manager, selected=set(selected))
    results: list[SectionResult] = []

    for name, build in _SECTION_BUILDERS:
        try:
            section = build(inv, settings, jdk)
        except SectionUnavailable as e:
            logger.warning("Skipping %s configuration: %s", name, e)
            results.append(SectionResult(name, False, detail=str(e)))
            continue
        if section is None:
            continue
        results.append(_write_section(writer, section))

    return results


def _write_section(writer: ProfileWriter, section: ProfileSection) -> SectionResult:
    header = section_header(section.name)
    written = 0
    try:
        for line in section.lines:
            if writer.ensure_line(line, header=header):
                written += 1
    except OSError as e:
        logger.error("Failed to write %s section to %s: %s", section.name, writer.path, e)
        return SectionResult(section.name, False, written, f"write failed: {e}")

    detail = f"{written} line(s) added" if written else "already configured"
    return SectionResult(section.name, True, written, detail)
