"""
Package set builder — merges every source into one deduplicated plan input.

Sources, in whatever order the caller feeds them:
    - catalog selections (per category)
    - Brewfile entries
    - ad-hoc names typed by the user (validated with ``info`` first)

Deduplication is exact and case-sensitive on ``name`` within each
kind. The built set is sorted by name so plans are deterministic.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable

from brewstrap.adapters.base import PackageManager
from brewstrap.core.models.intent import Category, PackageIntent, PackageKind
from brewstrap.core.services.catalog import JAVA_PLACEHOLDER

logger = logging.getLogger(__name__)

JdkResolver = Callable[[], "str | None"]


@dataclass(frozen=True)
class PackageSet:
    """Immutable snapshot of what the user wants installed."""

    formulas: tuple[PackageIntent, ...] = ()
    casks: tuple[PackageIntent, ...] = ()
    jdk: str | None = None

    @property
    def intents(self) -> list[PackageIntent]:
        """Formulas first, then casks."""
        return [*self.formulas, *self.casks]

    @property
    def names(self) -> set[str]:
        return {i.name for i in self.intents}

    @property
    def total(self) -> int:
        return len(self.formulas) + len(self.casks)

    @property
    def is_empty(self) -> bool:
        return self.total == 0

    def to_dict(self) -> dict:
        return {
            "formulas": [i.name for i in self.formulas],
            "casks": [i.name for i in self.casks],
            "jdk": self.jdk,
        }


@dataclass
class PackageSetBuilder:
    """Collects intents from several sources.

    Args:
        jdk_resolver: Called when the catalog's ``java`` entry is
            selected. Returns a concrete JDK formula, or None if the
            user backed out.
    """

    jdk_resolver: JdkResolver | None = None
    _seen: dict[tuple[PackageKind, str], PackageIntent] = field(default_factory=dict, init=False)
    _jdk: str | None = field(default=None, init=False)

    def add(self, intent: PackageIntent, source: str = "manual") -> bool:
        """Add one intent. Returns False if it was already present."""
        key = (intent.kind, intent.name)
        if key in self._seen:
            logger.debug("Duplicate %s '%s' from %s ignored", intent.kind.value, intent.name, source)
            return False
        self._seen[key] = intent
        logger.debug("Added %s '%s' from %s", intent.kind.value, intent.name, source)
        return True

    def add_many(self, intents: Iterable[PackageIntent], source: str = "manual") -> int:
        """Add several intents. Returns how many were new."""
        return sum(1 for i in intents if self.add(i, source))

    def add_catalog_selection(self, category: Category, names: Iterable[str]) -> None:
        """Add names picked from a catalog category.

        A selected ``java`` entry is never installed literally: it runs
        the JDK sub-flow and adds whatever concrete formula it returns.
        """
        names = list(names)
        if JAVA_PLACEHOLDER in names:
            names = [n for n in names if n != JAVA_PLACEHOLDER]
            jdk = self.jdk_resolver() if self.jdk_resolver else None
            if jdk:
                self.set_jdk(jdk)
            else:
                logger.info("JDK selection aborted, no JDK added")
        logger.info("User selected packages: %s", " ".join(names) or "(none)")
        self.add_many((category.intent(n) for n in names), source=category.label)

    def add_brewfile(self, intents: Iterable[PackageIntent]) -> int:
        return self.add_many(intents, source="Brewfile")

    def add_adhoc(self, name: str, kind: PackageKind, manager: PackageManager) -> bool:
        """Validate ``name`` with the package manager and add it.

        Returns:
            True if accepted. Unknown names are discarded.
        """
        name = name.strip()
        if not name:
            return False
        exit_code = manager.info(name)
        if exit_code != 0:
            logger.info("Rejected ad-hoc package '%s' (info exit %d)", name, exit_code)
            return False
        self.add(PackageIntent(name=name, kind=kind), source="ad-hoc")
        return True

    def set_jdk(self, name: str) -> None:
        """Record the JDK selection and add it as a formula."""
        self._jdk = name
        self.add(PackageIntent.formula(name), source="jdk")
        logger.info("User selected JDK: %s", name)

    @property
    def jdk(self) -> str | None:
        return self._jdk

    def build(self) -> PackageSet:
        """Sorted, deduplicated snapshot of everything collected."""
        formulas = sorted(
            (i for i in self._seen.values() if i.kind == PackageKind.FORMULA),
            key=lambda i: i.name,
        )
        casks = sorted(
            (i for i in self._seen.values() if i.kind == PackageKind.CASK),
            key=lambda i: i.name,
        )
        return PackageSet(formulas=tuple(formulas), casks=tuple(casks), jdk=self._jdk)
