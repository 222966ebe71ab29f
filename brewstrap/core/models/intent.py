"""
Intent models — what the user asked to install.

A PackageIntent is a requested ``(name, kind)`` pair. Intents are
created while collecting the package set and never mutated afterwards;
only the Outcome attached to them changes. The kind travels with the
intent all the way through execution and the bulk retry.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, model_validator


class PackageKind(str, Enum):
    """Homebrew package flavour."""

    FORMULA = "formula"   # command-line package
    CASK = "cask"         # GUI application


class PackageIntent(BaseModel):
    """A requested package, identified by ``(name, kind)``."""

    model_config = ConfigDict(frozen=True)

    name: str
    kind: PackageKind = PackageKind.FORMULA

    @classmethod
    def formula(cls, name: str) -> PackageIntent:
        return cls(name=name, kind=PackageKind.FORMULA)

    @classmethod
    def cask(cls, name: str) -> PackageIntent:
        return cls(name=name, kind=PackageKind.CASK)

    @property
    def is_cask(self) -> bool:
        return self.kind == PackageKind.CASK

    def __str__(self) -> str:
        return self.name


class CatalogEntry(BaseModel):
    """One installable item in the built-in catalog."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""

    @model_validator(mode="after")
    def _not_blank(self) -> CatalogEntry:
        if not self.name and not self.description:
            raise ValueError("Catalog entry needs a name or a description")
        return self

    @property
    def label(self) -> str:
        """Display text for selection menus."""
        if self.description:
            return f"{self.name} — {self.description}"
        return self.name


class Category(BaseModel):
    """A catalog category: a label, the kind of its entries, the entries."""

    model_config = ConfigDict(frozen=True)

    label: str
    kind: PackageKind
    entries: tuple[CatalogEntry, ...] = ()
    color: str = "cyan"

    @property
    def names(self) -> list[str]:
        return [e.name for e in self.entries]

    def intent(self, name: str) -> PackageIntent:
        """Build an intent of this category's kind."""
        return PackageIntent(name=name, kind=self.kind)
