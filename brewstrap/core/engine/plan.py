"""
Plan executor — installs a filtered package set and records outcomes.

Flow:
    formulas (sorted) → casks (sorted) → [one optional bulk retry]

Every intent goes through the retrying executor. A failed install
never aborts the batch. After the main pass the caller may accept a
single bulk retry of every failure; the kind stored on each intent
picks the install verb, and retried results replace the failures
in place. The bulk retry is never offered twice for one report.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Sequence

from brewstrap.adapters.base import PackageManager
from brewstrap.core.engine.executor import RetryingExecutor
from brewstrap.core.models.intent import PackageIntent
from brewstrap.core.models.outcome import Outcome

logger = logging.getLogger(__name__)

INSTALL_ATTEMPTS = 3
RETRY_ATTEMPTS = 1

RetryPrompt = Callable[[list[Outcome]], bool]


@dataclass
class PlanReport:
    """Result of executing a plan."""

    outcomes: list[Outcome] = field(default_factory=list)
    retry_offered: bool = False
    retried: bool = False

    @property
    def successes(self) -> list[Outcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def failures(self) -> list[Outcome]:
        return [o for o in self.outcomes if o.failed]

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def all_ok(self) -> bool:
        return not self.failures

    @property
    def status(self) -> str:
        if not self.failures:
            return "ok"
        if self.successes:
            return "partial"
        return "failed"

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "total": self.total,
            "succeeded": len(self.successes),
            "failed": len(self.failures),
            "retried": self.retried,
            "outcomes": [o.model_dump(mode="json") for o in self.outcomes],
        }


class PlanExecutor:
    """Sequential installer on top of the retrying executor."""

    def __init__(
        self,
        executor: RetryingExecutor,
        manager: PackageManager,
        *,
        attempts: int = INSTALL_ATTEMPTS,
        retry_attempts: int = RETRY_ATTEMPTS,
    ):
        self._executor = executor
        self._manager = manager
        self._attempts = attempts
        self._retry_attempts = retry_attempts

    def run(
        self,
        formulas: Sequence[PackageIntent],
        casks: Sequence[PackageIntent],
        *,
        already_satisfied: Sequence[Outcome] = (),
        confirm_retry: RetryPrompt | None = None,
    ) -> PlanReport:
        """Install all formulas, then all casks.

        Args:
            formulas: Formula intents still to install.
            casks: Cask intents still to install.
            already_satisfied: Outcomes from the installed filter, kept
                at the head of the report.
            confirm_retry: Asked once, with the failures, whether to run
                the bulk retry. None means never retry.
        """
        report = PlanReport(outcomes=list(already_satisfied))
        ordered = [*formulas, *casks]
        total = len(ordered)

        for index, intent in enumerate(ordered, start=1):
            title = f"Installing {intent.name} ({index}/{total})"
            report.outcomes.append(self._install(intent, title, self._attempts))

        if report.failures and confirm_retry is not None:
            report.retry_offered = True
            if confirm_retry(report.failures):
                self.bulk_retry(report)
            else:
                logger.info("User declined bulk retry of %d failure(s)", len(report.failures))

        logger.info(
            "Plan finished: %d succeeded, %d failed",
            len(report.successes), len(report.failures),
        )
        return report

    def bulk_retry(self, report: PlanReport) -> PlanReport:
        """Re-attempt every failure once, replacing outcomes in place."""
        if report.retried:
            logger.debug("Bulk retry already done for this report, skipping")
            return report
        report.retried = True

        failed = [i for i, o in enumerate(report.outcomes) if o.failed]
        logger.info("Bulk retry of %d failed package(s)", len(failed))
        for n, index in enumerate(failed, start=1):
            intent = report.outcomes[index].intent
            title = f"Retrying {intent.name} ({n}/{len(failed)})"
            report.outcomes[index] = self._install(
                intent, title, self._retry_attempts, retried=True,
            )
        return report

    def _install(
        self,
        intent: PackageIntent,
        title: str,
        attempts: int,
        retried: bool = False,
    ) -> Outcome:
        command = self._manager.install_command(intent)
        exit_code = self._executor.execute(title, attempts, command)
        if exit_code == 0:
            return Outcome.installed(intent, retried=retried)
        return Outcome.failure(intent, exit_code, retried=retried)
