"""
Tests for post-install health checks.
"""

from pathlib import Path

from brewstrap.core.services.health import (
    HealthReport,
    ToolHealth,
    check,
    in_profile_shell,
    probes_for,
)


class TestProbeSelection:
    def test_basic_tools(self):
        tools = [p.tool for p in probes_for(["git", "node", "gradle"])]
        assert tools == ["git", "node", "gradle"]

    def test_jdk_probe(self):
        probes = probes_for([], jdk="openjdk@17")
        assert [(p.tool, p.command) for p in probes] == [("java (openjdk@17)", "java -version")]

    def test_fvm_wins_over_flutter(self):
        tools = [p.tool for p in probes_for(["flutter", "fvm"])]
        assert tools == ["fvm", "flutter (via fvm)"]

    def test_plain_flutter(self):
        assert [p.command for p in probes_for(["flutter"])] == ["flutter --version"]

    def test_unrelated_packages(self):
        assert probes_for(["firefox", "slack"]) == []


class TestProfileShell:
    def test_zsh_profile(self):
        argv = in_profile_shell("git --version", Path("/home/u/.zshrc"))
        assert argv == ["zsh", "-c", "source /home/u/.zshrc >/dev/null 2>&1; git --version"]

    def test_bash_profile(self):
        argv = in_profile_shell("node --version", Path("/home/u/.bash_profile"))
        assert argv[0] == "bash"

    def test_quoted_path(self):
        argv = in_profile_shell("true", Path("/tmp/my home/.zshrc"))
        assert "source '/tmp/my home/.zshrc'" in argv[2]

    def test_no_profile(self):
        assert in_profile_shell("true", None) == ["bash", "-c", "true"]


class TestCheck:
    def test_all_healthy(self, fake_executor):
        ex = fake_executor()
        report = check(["git", "node"], None, ex)
        assert report.status == "healthy"
        assert ex.titles == ["Testing git", "Testing node"]
        assert all(attempts == 1 for _, attempts, _ in ex.calls)

    def test_failure_is_reported_not_raised(self, fake_executor):
        ex = fake_executor(codes=[0, 127])
        report = check(["git", "node"], None, ex)
        assert report.status == "degraded"
        bad = report.results[1]
        assert not bad.ok
        assert bad.detail == "`node --version` exited 127"

    def test_nothing_to_check(self, fake_executor):
        ex = fake_executor()
        report = check(["firefox"], None, ex)
        assert ex.calls == []
        assert report.status == "unknown"

    def test_runs_in_profile_shell(self, fake_executor, profile):
        ex = fake_executor()
        check(["git"], None, ex, profile=profile)
        assert ex.commands[0][0] == "zsh"
        assert str(profile) in ex.commands[0][2]


class TestHealthReport:
    def test_unhealthy(self):
        report = HealthReport()
        report.add(ToolHealth("git", False, "x"))
        assert report.status == "unhealthy"

    def test_to_dict(self):
        report = HealthReport([ToolHealth("git", True, "ok")])
        assert report.to_dict() == {
            "status": "healthy",
            "results": [{"tool": "git", "ok": True, "detail": "ok"}],
        }
