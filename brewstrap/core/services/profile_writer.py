"""
Profile writer — idempotent appends to the shell profile.

Lines owned by brewstrap are grouped under ``# brewstrap: <section>``
headers. A line is only appended if the exact line is absent, and a
header only if it is absent, so re-running a configuration step
leaves the file byte-identical. Pre-existing content is never edited
or removed.

Every write is open-append-close: a crash between two calls leaves a
partially configured file, never a corrupted one.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from brewstrap.core.errors import ProfileError

logger = logging.getLogger(__name__)

HEADER_PREFIX = "# brewstrap: "


def section_header(section: str) -> str:
    """The marker line that opens a brewstrap-owned section."""
    return f"{HEADER_PREFIX}{section}"


class ProfileWriter:
    """Appends lines to one shell profile, never twice.

    Raises:
        ProfileError: If the file is missing or not writable.
    """

    def __init__(self, path: Path):
        self._path = Path(path)
        if not self._path.is_file():
            raise ProfileError(f"Shell profile does not exist: {self._path}")
        if not os.access(self._path, os.W_OK):
            raise ProfileError(f"Shell profile is not writable: {self._path}")

    @property
    def path(self) -> Path:
        return self._path

    def has_line(self, line: str) -> bool:
        """Whether ``line`` is already present as a whole line."""
        return _encode(line) in self._lines()

    def ensure_line(self, line: str, header: str | None = None) -> bool:
        """Make sure ``line`` is in the profile, optionally under ``header``.

        Args:
            line: The exact line, without trailing newline.
            header: Optional section header line written before the
                first line of its section.

        Returns:
            True if anything was written.

        Raises:
            OSError: If the file cannot be read or appended to.
        """
        wanted = _encode(line)
        present = self._lines()
        if wanted in present:
            return False

        chunk: list[bytes] = []
        if header is not None and _encode(header) not in present:
            chunk.append(b"")  # blank separator before a new section
            chunk.append(_encode(header))
        chunk.append(wanted)

        self._append(chunk)
        for item in chunk:
            if item:
                logger.info("Writing to %s: %s", self._path, item.decode("utf-8"))
        return True

    # ── Internals ──────────────────────────────────────────────

    def _lines(self) -> set[bytes]:
        # Bytes, not text: a profile is not guaranteed to be UTF-8.
        return set(self._path.read_bytes().splitlines())

    def _append(self, chunk: list[bytes]) -> None:
        existing = self._path.read_bytes()
        if not existing and chunk and chunk[0] == b"":
            chunk = chunk[1:]  # no separator at the top of an empty file

        prefix = b""
        if existing and not existing.endswith(b"\n"):
            prefix = b"\n"

        with self._path.open("ab") as f:
            f.write(prefix + b"\n".join(chunk) + b"\n")


def _encode(line: str) -> bytes:
    return line.rstrip("\n").encode("utf-8")
