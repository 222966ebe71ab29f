"""
Installed filter — skip what the package manager already has.

The installed inventory is listed once per kind; membership is an
exact name match. Input order is preserved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from brewstrap.adapters.base import PackageManager
from brewstrap.core.models.intent import PackageIntent, PackageKind
from brewstrap.core.models.outcome import Outcome

logger = logging.getLogger(__name__)


@dataclass
class Partition:
    """Requested intents split into to-install and already-satisfied."""

    formulas: list[PackageIntent] = field(default_factory=list)
    casks: list[PackageIntent] = field(default_factory=list)
    already_satisfied: list[Outcome] = field(default_factory=list)

    @property
    def to_install(self) -> list[PackageIntent]:
        return [*self.formulas, *self.casks]


def partition(
    formulas: Sequence[PackageIntent],
    casks: Sequence[PackageIntent],
    manager: PackageManager,
) -> Partition:
    """Split the requested intents against the installed inventory.

    Returns:
        Partition whose ``already_satisfied`` outcomes and
        ``to_install`` intents together cover exactly the input.
    """
    result = Partition()

    for kind, requested, bucket in (
        (PackageKind.FORMULA, formulas, result.formulas),
        (PackageKind.CASK, casks, result.casks),
    ):
        if not requested:
            continue
        inventory = manager.list_installed(kind)
        for intent in requested:
            if intent.name in inventory:
                logger.info("Skipping already installed %s: %s", kind.value, intent.name)
                result.already_satisfied.append(Outcome.already_present(intent))
            else:
                bucket.append(intent)

    return result
