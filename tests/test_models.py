"""
Tests for core models — intents, catalog records, outcomes, settings.
"""

import pytest
from pydantic import ValidationError

from brewstrap.core.models import (
    AttemptRecord,
    CatalogEntry,
    Category,
    Outcome,
    PackageIntent,
    PackageKind,
    Settings,
)


class TestPackageIntent:
    def test_constructors(self):
        assert PackageIntent.formula("git").kind == PackageKind.FORMULA
        assert PackageIntent.cask("arc").is_cask

    def test_identity_is_name_and_kind(self):
        assert PackageIntent.formula("docker") != PackageIntent.cask("docker")
        assert len({PackageIntent.formula("a"), PackageIntent.formula("a")}) == 1

    def test_frozen(self):
        intent = PackageIntent.formula("git")
        with pytest.raises(ValidationError):
            intent.name = "node"

    def test_str(self):
        assert str(PackageIntent.cask("slack")) == "slack"


class TestCatalogRecords:
    def test_label(self):
        assert CatalogEntry(name="git", description="VCS").label == "git — VCS"
        assert CatalogEntry(name="git").label == "git"

    def test_blank_entry_rejected(self):
        with pytest.raises(ValidationError):
            CatalogEntry(name="", description="")

    def test_category_intent_kind(self):
        category = Category(label="Apps", kind=PackageKind.CASK, entries=(CatalogEntry(name="arc"),))
        assert category.names == ["arc"]
        assert category.intent("arc") == PackageIntent.cask("arc")


class TestOutcome:
    def test_labels(self):
        git = PackageIntent.formula("git")
        assert Outcome.installed(git).label == "git"
        assert Outcome.already_present(git).label == "git (already present)"
        assert Outcome.failure(git, 1).label == "git (exit 1)"

    def test_already_present_counts_as_success(self):
        outcome = Outcome.already_present(PackageIntent.formula("git"))
        assert outcome.ok
        assert not outcome.failed
        assert outcome.exit_code == 0

    def test_failure_keeps_exit_code(self):
        outcome = Outcome.failure(PackageIntent.cask("x"), 127, retried=True)
        assert outcome.failed
        assert outcome.exit_code == 127
        assert outcome.retried

    def test_attempt_record(self):
        assert AttemptRecord(title="t", attempt=1, max_attempts=3, exit_code=0).ok
        assert not AttemptRecord(title="t", attempt=3, max_attempts=3, exit_code=2).ok


class TestSettings:
    def test_defaults_under_home(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))
        settings = Settings()
        assert settings.android_sdk_path == str(tmp_path / "Library" / "Android" / "sdk")
        assert settings.gradle_home_path == str(tmp_path / ".gradle")
        assert settings.use_china_mirror is False
        assert settings.jdk is None
