"""
Shared test fixtures and test doubles.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from brewstrap.adapters.mock import MockPackageManager
from brewstrap.core.observability.run_log import close_run_log


class FakeExecutor:
    """Stands in for RetryingExecutor without spawning anything.

    Exit codes come from ``by_name`` (keyed by the last argv element,
    i.e. the package name for ``brew install`` commands), then from the
    ordered ``codes`` list, then ``default``. A list value in
    ``by_name`` is consumed one entry per call, the last entry sticks.
    """

    def __init__(
        self,
        codes: list[int] | None = None,
        by_name: dict[str, list[int]] | None = None,
        default: int = 0,
    ):
        self._codes = list(codes or [])
        self._by_name = {k: list(v) for k, v in (by_name or {}).items()}
        self._default = default
        self.calls: list[tuple[str, int, object]] = []

    def execute(self, title, max_attempts, command):
        self.calls.append((title, max_attempts, command))
        key = command[-1] if isinstance(command, list) and command else None
        if key in self._by_name:
            seq = self._by_name[key]
            return seq.pop(0) if len(seq) > 1 else seq[0]
        if self._codes:
            return self._codes.pop(0)
        return self._default

    @property
    def titles(self) -> list[str]:
        return [title for title, _, _ in self.calls]

    @property
    def commands(self) -> list[object]:
        return [command for _, _, command in self.calls]


@pytest.fixture
def fake_executor():
    """Factory for FakeExecutor instances."""
    return FakeExecutor


@pytest.fixture
def mock_pm() -> MockPackageManager:
    """A package manager with nothing installed."""
    return MockPackageManager()


@pytest.fixture
def profile(tmp_path: Path) -> Path:
    """An empty shell profile."""
    path = tmp_path / ".zshrc"
    path.touch()
    return path


@pytest.fixture(autouse=True)
def _no_run_log_leak():
    """Make sure no test leaves the run log handler attached."""
    yield
    close_run_log()
