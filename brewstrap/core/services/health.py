"""
Health verifier — smoke-test the tools a run was meant to provide.

Each probe is a cheap version query run inside the user's shell after
re-sourcing the profile, so freshly written variables (JAVA_HOME,
FVM_HOME, ...) are visible. Healthy means exit code 0 and nothing
more. Probes never abort a run; results only feed the summary.
"""

from __future__ import annotations

import logging
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

from brewstrap.core.engine.executor import RetryingExecutor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolProbe:
    """A tool name and the shell command that proves it works."""

    tool: str
    command: str


@dataclass
class ToolHealth:
    """Health of a single tool."""

    tool: str
    ok: bool
    detail: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"tool": self.tool, "ok": self.ok, "detail": self.detail}


@dataclass
class HealthReport:
    """Aggregate of every probe in a run."""

    results: list[ToolHealth] = field(default_factory=list)

    def add(self, result: ToolHealth) -> None:
        self.results.append(result)

    @property
    def status(self) -> str:
        if not self.results:
            return "unknown"
        if all(r.ok for r in self.results):
            return "healthy"
        if any(r.ok for r in self.results):
            return "degraded"
        return "unhealthy"

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "results": [r.to_dict() for r in self.results],
        }


def probes_for(selected: Iterable[str], jdk: str | None = None) -> list[ToolProbe]:
    """Probes implied by the selected package names.

    FVM takes precedence over a plain Flutter install since it puts
    its own ``flutter`` on the PATH.
    """
    names = set(selected)
    probes: list[ToolProbe] = []

    if "git" in names:
        probes.append(ToolProbe("git", "git --version"))
    if "node" in names:
        probes.append(ToolProbe("node", "node --version"))
    if jdk:
        probes.append(ToolProbe(f"java ({jdk})", "java -version"))
    if "fvm" in names:
        probes.append(ToolProbe("fvm", "fvm --version"))
        probes.append(ToolProbe("flutter (via fvm)", "fvm flutter --version"))
    elif "flutter" in names:
        probes.append(ToolProbe("flutter", "flutter --version"))
    if "gradle" in names:
        probes.append(ToolProbe("gradle", "gradle --version"))

    return probes


def profile_shell(profile: Path | None) -> str:
    """Shell that understands ``profile`` (zsh for .zshrc, else bash)."""
    if profile is not None and profile.name.startswith(".zsh"):
        return "zsh"
    return "bash"


def in_profile_shell(command: str, profile: Path | None) -> list[str]:
    """Wrap ``command`` so it runs after sourcing ``profile``."""
    if profile is None:
        return ["bash", "-c", command]
    script = f"source {shlex.quote(str(profile))} >/dev/null 2>&1; {command}"
    return [profile_shell(profile), "-c", script]


def check(
    selected: Iterable[str],
    jdk: str | None,
    executor: RetryingExecutor,
    profile: Path | None = None,
) -> HealthReport:
    """Run every implied probe once and collect the results."""
    report = HealthReport()
    probes = probes_for(selected, jdk)
    logger.info("Running %d post-install health check(s)", len(probes))

    for probe in probes:
        exit_code = executor.execute(
            f"Testing {probe.tool}", 1, in_profile_shell(probe.command, profile),
        )
        if exit_code == 0:
            report.add(ToolHealth(probe.tool, True, "ok"))
        else:
            report.add(ToolHealth(probe.tool, False, f"`{probe.command}` exited {exit_code}"))

    return report
