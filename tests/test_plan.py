"""
Tests for the plan executor and bulk retry.

Uses the real Homebrew adapter for install commands (argv only, no
``brew`` is spawned) so the fake executor can key exit codes on the
package name.
"""

import pytest

from brewstrap.adapters.brew import HomebrewAdapter
from brewstrap.core.engine.plan import INSTALL_ATTEMPTS, PlanExecutor, PlanReport
from brewstrap.core.models.intent import PackageIntent
from brewstrap.core.models.outcome import Outcome

F = PackageIntent.formula
C = PackageIntent.cask


@pytest.fixture
def brew():
    return HomebrewAdapter()


# ── Main pass ────────────────────────────────────────────────────────


class TestMainPass:
    def test_formulas_before_casks(self, fake_executor, brew):
        ex = fake_executor()
        PlanExecutor(ex, brew).run([F("git"), F("node")], [C("firefox")])
        assert ex.commands == [
            ["brew", "install", "git"],
            ["brew", "install", "node"],
            ["brew", "install", "--cask", "firefox"],
        ]

    def test_progress_counter_in_titles(self, fake_executor, brew):
        ex = fake_executor()
        PlanExecutor(ex, brew).run([F("git")], [C("arc"), C("slack")])
        assert ex.titles == [
            "Installing git (1/3)",
            "Installing arc (2/3)",
            "Installing slack (3/3)",
        ]

    def test_attempts_per_install(self, fake_executor, brew):
        ex = fake_executor()
        PlanExecutor(ex, brew).run([F("git")], [])
        assert ex.calls[0][1] == INSTALL_ATTEMPTS == 3

    def test_failure_does_not_abort_batch(self, fake_executor, brew):
        ex = fake_executor(by_name={"node": [1]})
        report = PlanExecutor(ex, brew).run([F("git"), F("node"), F("wget")], [])
        assert len(ex.calls) == 3
        assert [o.intent.name for o in report.failures] == ["node"]
        assert report.status == "partial"

    def test_already_satisfied_kept_at_head(self, fake_executor, brew):
        ex = fake_executor()
        done = [Outcome.already_present(F("git"))]
        report = PlanExecutor(ex, brew).run([F("node")], [], already_satisfied=done)
        assert [o.status for o in report.outcomes] == ["already_present", "installed"]
        assert report.total == 2

    def test_empty_plan(self, fake_executor, brew):
        ex = fake_executor()
        report = PlanExecutor(ex, brew).run([], [])
        assert ex.calls == []
        assert report.all_ok
        assert report.status == "ok"

    def test_all_failed(self, fake_executor, brew):
        ex = fake_executor(default=1)
        report = PlanExecutor(ex, brew).run([F("a")], [])
        assert report.status == "failed"
        assert report.failures[0].label == "a (exit 1)"


# ── Bulk retry ───────────────────────────────────────────────────────


class TestBulkRetry:
    def test_retry_recovers_one(self, fake_executor, brew):
        # a fails the main pass then succeeds; b fails both times.
        ex = fake_executor(by_name={"a": [1, 0], "b": [1]})
        prompts = []

        def confirm(failures):
            prompts.append([o.intent.name for o in failures])
            return True

        report = PlanExecutor(ex, brew).run([F("a"), F("b")], [], confirm_retry=confirm)

        assert prompts == [["a", "b"]]
        assert ex.titles[2:] == ["Retrying a (1/2)", "Retrying b (2/2)"]
        assert [o.intent.name for o in report.successes] == ["a"]
        assert [o.intent.name for o in report.failures] == ["b"]
        assert all(o.retried for o in report.outcomes)
        assert report.retried

    def test_retry_uses_single_attempt(self, fake_executor, brew):
        ex = fake_executor(by_name={"a": [1, 0]})
        PlanExecutor(ex, brew).run([F("a")], [], confirm_retry=lambda f: True)
        assert [attempts for _, attempts, _ in ex.calls] == [3, 1]

    def test_retry_replaces_in_place(self, fake_executor, brew):
        ex = fake_executor(by_name={"b": [1, 0]})
        report = PlanExecutor(ex, brew).run(
            [F("a"), F("b"), F("c")], [], confirm_retry=lambda f: True,
        )
        assert [o.intent.name for o in report.outcomes] == ["a", "b", "c"]
        assert report.all_ok

    def test_cask_verb_preserved(self, fake_executor, brew):
        ex = fake_executor(by_name={"firefox": [1, 0]})
        PlanExecutor(ex, brew).run([], [C("firefox")], confirm_retry=lambda f: True)
        assert ex.commands[-1] == ["brew", "install", "--cask", "firefox"]

    def test_retry_needs_no_queries(self, fake_executor, mock_pm):
        mock_pm.set_failure("slack")
        ex = fake_executor(by_name={"false": [1]})
        PlanExecutor(ex, mock_pm).run([], [C("slack")], confirm_retry=lambda f: True)
        assert mock_pm.calls == [("install-cask", "slack"), ("install-cask", "slack")]

    def test_declined_retry(self, fake_executor, brew):
        ex = fake_executor(by_name={"a": [1]})
        report = PlanExecutor(ex, brew).run([F("a")], [], confirm_retry=lambda f: False)
        assert len(ex.calls) == 1
        assert report.retry_offered
        assert not report.retried
        assert report.failures[0].retried is False

    def test_not_offered_without_failures(self, fake_executor, brew):
        asked = []
        report = PlanExecutor(fake_executor(), brew).run(
            [F("a")], [], confirm_retry=lambda f: asked.append(f) or True,
        )
        assert asked == []
        assert not report.retry_offered

    def test_never_retried_twice(self, fake_executor, brew):
        ex = fake_executor(by_name={"a": [1]})
        plan = PlanExecutor(ex, brew)
        report = plan.run([F("a")], [], confirm_retry=lambda f: True)
        assert len(ex.calls) == 2
        plan.bulk_retry(report)
        assert len(ex.calls) == 2

    def test_report_to_dict(self):
        report = PlanReport(outcomes=[Outcome.failure(F("a"), 2)])
        data = report.to_dict()
        assert data["status"] == "failed"
        assert data["failed"] == 1
        assert data["outcomes"][0]["intent"] == {"name": "a", "kind": "formula"}
