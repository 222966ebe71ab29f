"""
Preflight — phase-level preconditions checked before any collection.

Failures here raise ``PreflightError`` and abort the run before a
single package is selected or installed.
"""

from __future__ import annotations

import logging
import os
import platform
import subprocess
from pathlib import Path
from typing import Mapping

from brewstrap.core.errors import PreflightError

logger = logging.getLogger(__name__)


def check_platform(system: str | None = None) -> None:
    """Only macOS is supported."""
    system = system or platform.system()
    if system != "Darwin":
        raise PreflightError(f"brewstrap only supports macOS (detected {system or 'unknown'}).")


def has_xcode_clt() -> bool:
    """Whether the Xcode Command Line Tools are installed."""
    try:
        r = subprocess.run(
            ["xcode-select", "-p"],
            capture_output=True,
            text=True,
            timeout=15,
        )
    except (OSError, subprocess.TimeoutExpired):
        return False
    return r.returncode == 0


def require_xcode_clt() -> None:
    """Fail if the CLT are missing, after launching their installer."""
    logger.info("Performing preflight check for Xcode Command Line Tools")
    if has_xcode_clt():
        logger.info("Xcode Command Line Tools found")
        return

    logger.info("Xcode Command Line Tools not found, launching installer")
    try:
        subprocess.run(["xcode-select", "--install"], capture_output=True, timeout=30)
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.warning("Could not launch the CLT installer: %s", e)
    raise PreflightError(
        "Xcode Command Line Tools are missing. The installer has been launched; "
        "re-run brewstrap once it finishes."
    )


def run_preflight() -> None:
    """All fatal preconditions, in order."""
    check_platform()
    require_xcode_clt()


def detect_shell_profile(
    home: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> Path:
    """Pick the profile to configure, creating it empty if absent.

    ``~/.zshrc`` when running under zsh or when it already exists,
    otherwise ``~/.bash_profile``.
    """
    home = home or Path.home()
    env = os.environ if env is None else env

    zshrc = home / ".zshrc"
    if env.get("ZSH_VERSION") or zshrc.exists() or env.get("SHELL", "").endswith("/zsh"):
        profile = zshrc
    else:
        profile = home / ".bash_profile"

    profile.touch(exist_ok=True)
    logger.info("Shell profile set to: %s", profile)
    return profile
