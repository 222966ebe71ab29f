"""
Mock package manager — test double for the package manager boundary.

Keeps an in-memory inventory and records every query. Install
commands are plain ``true``/``false`` argv lists so they can also be
fed to the real executor.
"""

from __future__ import annotations

from brewstrap.adapters.base import PackageManager
from brewstrap.core.models.intent import PackageIntent, PackageKind


class MockPackageManager(PackageManager):
    """In-memory package manager for testing.

    By default every name is known, nothing is installed, and every
    install command succeeds.
    """

    def __init__(
        self,
        installed_formulas: set[str] | None = None,
        installed_casks: set[str] | None = None,
        known: set[str] | None = None,
        prefixes: dict[str, str] | None = None,
        available: bool = True,
    ):
        self._installed = {
            PackageKind.FORMULA: set(installed_formulas or ()),
            PackageKind.CASK: set(installed_casks or ()),
        }
        self._known = known
        self._prefixes = dict(prefixes or {})
        self._available = available
        self._failing: set[str] = set()
        self.calls: list[tuple[str, str]] = []

    @property
    def name(self) -> str:
        return "mock"

    def is_available(self) -> bool:
        return self._available

    def set_failure(self, name: str) -> None:
        """Make the install command for ``name`` fail."""
        self._failing.add(name)

    def install_command(self, intent: PackageIntent) -> list[str]:
        verb = "install-cask" if intent.is_cask else "install"
        self.calls.append((verb, intent.name))
        return ["false"] if intent.name in self._failing else ["true"]

    def update_command(self) -> list[str]:
        return ["true"]

    def cleanup_command(self) -> list[str]:
        return ["true"]

    def info(self, name: str) -> int:
        self.calls.append(("info", name))
        if self._known is None or name in self._known:
            return 0
        return 1

    def list_installed(self, kind: PackageKind) -> set[str]:
        self.calls.append(("list", kind.value))
        return set(self._installed[kind])

    def prefix(self, name: str) -> str | None:
        self.calls.append(("prefix", name))
        return self._prefixes.get(name)

    def query_count(self, verb: str) -> int:
        return sum(1 for v, _ in self.calls if v == verb)
