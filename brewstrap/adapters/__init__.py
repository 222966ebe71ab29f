"""Adapters — package manager bindings.

Public re-exports for convenient access.
"""

from brewstrap.adapters.base import PackageManager
from brewstrap.adapters.brew import HomebrewAdapter
from brewstrap.adapters.mock import MockPackageManager

__all__ = [
    "HomebrewAdapter",
    "MockPackageManager",
    "PackageManager",
]
