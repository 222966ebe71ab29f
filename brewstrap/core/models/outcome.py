"""
Outcome and AttemptRecord models — the execution results.

Outcomes are the terminal classification of one intent after the run.
AttemptRecords are the per-attempt trail of the retrying executor;
they are logged and then dropped once the intent resolves.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, Field

from brewstrap.core.models.intent import PackageIntent


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class AttemptRecord(BaseModel):
    """One try of one command."""

    title: str
    attempt: int
    max_attempts: int
    exit_code: int
    output: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class Outcome(BaseModel):
    """Terminal result of one intent.

    ``installed`` and ``already_present`` both count as success;
    ``already_present`` means no install command was run at all.
    """

    intent: PackageIntent
    status: Literal["installed", "already_present", "failed"] = "installed"
    exit_code: int = 0
    retried: bool = False
    recorded_at: str = Field(default_factory=_now_iso)

    @property
    def ok(self) -> bool:
        return self.status != "failed"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @property
    def label(self) -> str:
        """Summary line text, e.g. ``git (already present)``."""
        if self.status == "already_present":
            return f"{self.intent.name} (already present)"
        if self.status == "failed":
            return f"{self.intent.name} (exit {self.exit_code})"
        return self.intent.name

    @classmethod
    def installed(cls, intent: PackageIntent, **kwargs) -> Outcome:
        return cls(intent=intent, status="installed", exit_code=0, **kwargs)

    @classmethod
    def already_present(cls, intent: PackageIntent) -> Outcome:
        return cls(intent=intent, status="already_present", exit_code=0)

    @classmethod
    def failure(cls, intent: PackageIntent, exit_code: int, **kwargs) -> Outcome:
        return cls(intent=intent, status="failed", exit_code=exit_code, **kwargs)
