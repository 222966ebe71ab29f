"""
Error types shared across layers.

Command failures are never raised: the executor and adapters return
exit codes. Exceptions are reserved for phase-level problems.
"""

from __future__ import annotations


class BrewstrapError(Exception):
    """Base class for errors that abort a run or a phase."""


class PreflightError(BrewstrapError):
    """Unsupported environment or missing core dependency."""


class ProfileError(BrewstrapError):
    """The shell profile cannot be used for writing."""


class ConfigError(BrewstrapError):
    """Raised when an exported configuration is invalid or missing."""
