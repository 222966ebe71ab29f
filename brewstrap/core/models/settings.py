"""
Settings — user choices that shape a run but are not packages.

These are the values captured by a configuration export: mirror
choice, custom SDK paths, and the JDK selection.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


def _home(*parts: str) -> str:
    return str(Path.home().joinpath(*parts))


class Settings(BaseModel):
    """Run settings (round-trippable through export/import)."""

    use_china_mirror: bool = False
    android_sdk_path: str = Field(default_factory=lambda: _home("Library", "Android", "sdk"))
    gradle_home_path: str = Field(default_factory=lambda: _home(".gradle"))
    fvm_home_path: str = Field(default_factory=lambda: _home(".fvm"))
    jdk: str | None = None
    shell_profile: str | None = None   # detected at runtime, not exported
