"""
Homebrew adapter — the real package manager binding.

Queries shell out to ``brew`` synchronously; install/update/cleanup
are handed back as argv lists for the retrying executor.
"""

from __future__ import annotations

import logging
import shutil
import subprocess

from brewstrap.adapters.base import PackageManager
from brewstrap.core.models.intent import PackageIntent, PackageKind

logger = logging.getLogger(__name__)

OFFICIAL_INSTALL_URL = "https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh"
MIRROR_INSTALL_URL = "https://gitee.com/cunkai/HomebrewCN/raw/master/Homebrew.sh"


def _run(args: list[str], timeout: int = 60) -> subprocess.CompletedProcess[str]:
    """Run a command and return the result."""
    return subprocess.run(
        args,
        capture_output=True,
        text=True,
        timeout=timeout,
    )


class HomebrewAdapter(PackageManager):
    """Talks to the ``brew`` CLI."""

    def __init__(self, brew: str = "brew"):
        self._brew = brew

    @property
    def name(self) -> str:
        return "brew"

    def is_available(self) -> bool:
        return shutil.which(self._brew) is not None

    def install_command(self, intent: PackageIntent) -> list[str]:
        if intent.kind == PackageKind.CASK:
            return [self._brew, "install", "--cask", intent.name]
        return [self._brew, "install", intent.name]

    def update_command(self) -> list[str]:
        return [self._brew, "update"]

    def cleanup_command(self) -> list[str]:
        return [self._brew, "cleanup"]

    def info(self, name: str) -> int:
        try:
            r = _run([self._brew, "info", name])
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.warning("brew info %s failed: %s", name, e)
            return 1
        return r.returncode

    def list_installed(self, kind: PackageKind) -> set[str]:
        flag = "--cask" if kind == PackageKind.CASK else "--formula"
        try:
            r = _run([self._brew, "list", flag, "-1"], timeout=120)
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.warning("brew list %s failed: %s", flag, e)
            return set()
        if r.returncode != 0:
            logger.warning("brew list %s exited %d", flag, r.returncode)
            return set()
        return {line.strip() for line in r.stdout.splitlines() if line.strip()}

    def prefix(self, name: str) -> str | None:
        try:
            r = _run([self._brew, "--prefix", name])
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.warning("brew --prefix %s failed: %s", name, e)
            return None
        out = r.stdout.strip()
        if r.returncode != 0 or not out:
            return None
        return out


def bootstrap_command(use_china_mirror: bool) -> str:
    """Shell snippet that installs Homebrew if missing, then updates it."""
    url = MIRROR_INSTALL_URL if use_china_mirror else OFFICIAL_INSTALL_URL
    return (
        "if ! command -v brew >/dev/null 2>&1; then "
        f'/bin/bash -c "$(curl -fsSL {url})"; '
        "fi && brew update"
    )


def probe_command(url: str = OFFICIAL_INSTALL_URL) -> list[str]:
    """Reachability probe for the official installer."""
    return ["curl", "-s", "--connect-timeout", "5", "-o", "/dev/null", url]
