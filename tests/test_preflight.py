"""
Tests for preflight checks and shell profile detection.
"""

import subprocess
from pathlib import Path

import pytest

from brewstrap.core.errors import PreflightError
from brewstrap.core.services import preflight
from brewstrap.core.services.preflight import check_platform, detect_shell_profile


class TestPlatform:
    def test_darwin_ok(self):
        check_platform("Darwin")

    @pytest.mark.parametrize("system", ["Linux", "Windows"])
    def test_other_systems_rejected(self, system):
        with pytest.raises(PreflightError, match="macOS"):
            check_platform(system)


class TestXcodeCLT:
    def test_present(self, monkeypatch):
        monkeypatch.setattr(preflight, "has_xcode_clt", lambda: True)
        preflight.require_xcode_clt()

    def test_missing_launches_installer(self, monkeypatch):
        launched = []
        monkeypatch.setattr(preflight, "has_xcode_clt", lambda: False)
        monkeypatch.setattr(
            preflight.subprocess, "run",
            lambda args, **kw: launched.append(args) or subprocess.CompletedProcess(args, 0),
        )
        with pytest.raises(PreflightError, match="Command Line Tools"):
            preflight.require_xcode_clt()
        assert launched == [["xcode-select", "--install"]]

    def test_probe_missing_binary(self, monkeypatch):
        def boom(*args, **kwargs):
            raise FileNotFoundError("xcode-select")

        monkeypatch.setattr(preflight.subprocess, "run", boom)
        assert preflight.has_xcode_clt() is False


class TestShellProfile:
    def test_zsh_from_env(self, tmp_path: Path):
        profile = detect_shell_profile(tmp_path, {"ZSH_VERSION": "5.9"})
        assert profile == tmp_path / ".zshrc"
        assert profile.exists()

    def test_existing_zshrc(self, tmp_path: Path):
        (tmp_path / ".zshrc").write_text("x\n")
        profile = detect_shell_profile(tmp_path, {})
        assert profile == tmp_path / ".zshrc"
        assert profile.read_text() == "x\n"

    def test_login_shell_zsh(self, tmp_path: Path):
        assert detect_shell_profile(tmp_path, {"SHELL": "/bin/zsh"}).name == ".zshrc"

    def test_bash_fallback_created(self, tmp_path: Path):
        profile = detect_shell_profile(tmp_path, {"SHELL": "/bin/bash"})
        assert profile == tmp_path / ".bash_profile"
        assert profile.is_file()
        assert profile.read_text() == ""
