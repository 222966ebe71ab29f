"""
Package manager base — the contract between the engine and Homebrew.

The engine only talks to the package manager through this interface.
Install, update and cleanup are returned as *commands* so the retrying
executor can run them with a spinner; quick queries (info, list,
prefix) run directly and return plain values.

Exit-code contract of every command: 0 = success, anything else =
failure, diagnostics on the standard streams.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from brewstrap.core.models.intent import PackageIntent, PackageKind


class PackageManager(ABC):
    """Abstract base class for package managers.

    Query methods MUST never raise for command failures; a failed
    lookup is reported through the return value.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The manager identifier (e.g., 'brew')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the manager's CLI can be found. Fast, never raises."""

    @abstractmethod
    def install_command(self, intent: PackageIntent) -> list[str]:
        """Command that installs ``intent`` (plain or GUI-app variant)."""

    @abstractmethod
    def update_command(self) -> list[str]:
        """Command that refreshes the manager's own package index."""

    @abstractmethod
    def cleanup_command(self) -> list[str]:
        """Command that prunes the download cache."""

    @abstractmethod
    def info(self, name: str) -> int:
        """Look ``name`` up. Returns the exit code (0 = known package)."""

    @abstractmethod
    def list_installed(self, kind: PackageKind) -> set[str]:
        """Names of every installed package of ``kind``."""

    @abstractmethod
    def prefix(self, name: str) -> str | None:
        """Install prefix of ``name``, or None if it cannot be resolved."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
