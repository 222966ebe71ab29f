"""
Domain models — Pydantic types for brewstrap.

All models are re-exported here for convenient access:

    from brewstrap.core.models import PackageIntent, Outcome, Settings
"""

from brewstrap.core.models.intent import (
    CatalogEntry,
    Category,
    PackageIntent,
    PackageKind,
)
from brewstrap.core.models.outcome import AttemptRecord, Outcome
from brewstrap.core.models.settings import Settings

__all__ = [
    # intent.py
    "CatalogEntry",
    "Category",
    "PackageIntent",
    "PackageKind",
    # outcome.py
    "AttemptRecord",
    "Outcome",
    # settings.py
    "Settings",
]
