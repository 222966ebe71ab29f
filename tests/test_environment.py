"""
Tests for shell environment configuration.
"""

from pathlib import Path

import pytest

from brewstrap.adapters.mock import MockPackageManager
from brewstrap.core.errors import ProfileError
from brewstrap.core.models.settings import Settings
from brewstrap.core.services.environment import (
    alias_line,
    configure_environment,
    export_line,
    path_line,
)
from brewstrap.core.services.profile_writer import section_header

SETTINGS = Settings(
    android_sdk_path="/sdk",
    gradle_home_path="/gradle",
    fvm_home_path="/fvm",
)


class TestLineBuilders:
    def test_export(self):
        assert export_line("A", "/x") == 'export A="/x"'

    def test_path_prepend_and_append(self):
        assert path_line("$X/bin") == 'export PATH="$X/bin:$PATH"'
        assert path_line("$X/bin", append=True) == 'export PATH="$PATH:$X/bin"'

    def test_alias(self):
        assert alias_line("flutter", "fvm flutter") == "alias flutter='fvm flutter'"


class TestSectionSelection:
    def test_nothing_applicable(self, profile: Path, mock_pm):
        results = configure_environment(profile, ["git", "firefox"], SETTINGS, mock_pm)
        assert results == []
        assert profile.read_text() == ""

    def test_java_section(self, profile: Path):
        pm = MockPackageManager(prefixes={"openjdk@17": "/opt/homebrew/opt/openjdk@17"})
        results = configure_environment(
            profile, ["openjdk@17"], SETTINGS, pm, jdk="openjdk@17",
        )
        assert [r.section for r in results] == ["Java"]
        text = profile.read_text()
        assert 'export JAVA_HOME="/opt/homebrew/opt/openjdk@17"' in text
        assert 'export PATH="$JAVA_HOME/bin:$PATH"' in text

    def test_java_from_installed_openjdk(self, profile: Path):
        pm = MockPackageManager(
            installed_formulas={"openjdk@21"},
            prefixes={"openjdk@21": "/opt/jdk21"},
        )
        configure_environment(profile, ["git"], SETTINGS, pm)
        assert 'export JAVA_HOME="/opt/jdk21"' in profile.read_text()

    def test_android_from_installed_cask(self, profile: Path):
        pm = MockPackageManager(installed_casks={"android-studio"})
        results = configure_environment(profile, [], SETTINGS, pm)
        assert [r.section for r in results] == ["Android SDK"]
        text = profile.read_text()
        assert 'export ANDROID_HOME="/sdk"' in text
        assert 'export PATH="$PATH:$ANDROID_HOME/platform-tools"' in text

    def test_gradle_and_fvm(self, profile: Path, mock_pm):
        configure_environment(profile, ["gradle", "fvm"], SETTINGS, mock_pm)
        text = profile.read_text()
        assert 'export GRADLE_USER_HOME="/gradle"' in text
        assert 'export FVM_HOME="/fvm"' in text
        assert "alias flutter='fvm flutter'" in text
        assert section_header("Gradle") in text


class TestSectionIsolation:
    def test_java_prefix_failure_does_not_stop_others(self, profile: Path, mock_pm):
        results = configure_environment(
            profile, ["openjdk@17", "gradle"], SETTINGS, mock_pm, jdk="openjdk@17",
        )
        by_name = {r.section: r for r in results}
        assert not by_name["Java"].ok
        assert "openjdk@17" in by_name["Java"].detail
        assert by_name["Gradle"].ok
        assert "JAVA_HOME" not in profile.read_text()

    def test_unusable_profile_raises(self, tmp_path: Path, mock_pm):
        with pytest.raises(ProfileError):
            configure_environment(tmp_path / "missing", ["gradle"], SETTINGS, mock_pm)


class TestIdempotence:
    def test_second_run_writes_nothing(self, profile: Path):
        pm = MockPackageManager(prefixes={"openjdk@17": "/opt/jdk"})
        selected = ["openjdk@17", "gradle", "fvm", "android-studio"]
        configure_environment(profile, selected, SETTINGS, pm, jdk="openjdk@17")
        first = profile.read_bytes()

        results = configure_environment(profile, selected, SETTINGS, pm, jdk="openjdk@17")
        assert profile.read_bytes() == first
        assert all(r.written == 0 and r.detail == "already configured" for r in results)

    def test_shared_path_line_written_once(self, profile: Path):
        pm = MockPackageManager(prefixes={"openjdk@17": "/opt/jdk"})
        configure_environment(profile, ["openjdk@17"], SETTINGS, pm, jdk="openjdk@17")
        configure_environment(profile, ["openjdk@17"], SETTINGS, pm, jdk="openjdk@17")
        assert profile.read_text().count('export PATH="$JAVA_HOME/bin:$PATH"') == 1
