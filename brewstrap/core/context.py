"""
Run context — the single piece of state a run carries.

Owned by the top-level command. Phases read from it and hand back
their results; nothing lives in module globals. The plan phase fills
``settings``, ``packages`` and ``profile``; the apply phase fills the
rest.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from brewstrap.core.engine.plan import PlanReport
from brewstrap.core.models.settings import Settings
from brewstrap.core.services.environment import SectionResult
from brewstrap.core.services.health import HealthReport
from brewstrap.core.services.package_set import PackageSet


@dataclass
class RunContext:
    """Everything one invocation knows about its own run."""

    settings: Settings = field(default_factory=Settings)
    packages: PackageSet = field(default_factory=PackageSet)
    profile: Path | None = None
    log_path: Path | None = None

    # ── Apply phase results ──────────────────────────────────────
    report: PlanReport | None = None
    environment: list[SectionResult] = field(default_factory=list)
    environment_error: str | None = None
    health: HealthReport | None = None

    @property
    def jdk(self) -> str | None:
        return self.packages.jdk or self.settings.jdk

    def to_dict(self) -> dict[str, Any]:
        return {
            "settings": self.settings.model_dump(mode="json"),
            "packages": self.packages.to_dict(),
            "profile": str(self.profile) if self.profile else None,
            "log_path": str(self.log_path) if self.log_path else None,
            "report": self.report.to_dict() if self.report else None,
            "environment": [r.to_dict() for r in self.environment],
            "environment_error": self.environment_error,
            "health": self.health.to_dict() if self.health else None,
        }
