"""
Brewfile grammar — the external package list format.

Only two line shapes matter:

    brew '<name>'    → formula intent
    cask '<name>'    → cask intent

Everything else (comments, blank lines, ``tap``/``mas`` lines, options
after the name) is ignored. Double quotes are accepted as well.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Iterable

from brewstrap.core.errors import ConfigError
from brewstrap.core.models.intent import PackageIntent, PackageKind

logger = logging.getLogger(__name__)

BREWFILE_NAME = "Brewfile"

_LINE_RE = re.compile(r"""^(brew|cask)\s+(['"])([^'"]+)\2""")

_VERB_KIND = {"brew": PackageKind.FORMULA, "cask": PackageKind.CASK}
_KIND_VERB = {v: k for k, v in _VERB_KIND.items()}


def parse_brewfile(text: str) -> list[PackageIntent]:
    """Extract intents from Brewfile text, in file order."""
    intents: list[PackageIntent] = []
    for raw in text.splitlines():
        m = _LINE_RE.match(raw.strip())
        if not m:
            continue
        verb, _, name = m.groups()
        intents.append(PackageIntent(name=name.strip(), kind=_VERB_KIND[verb]))
    return intents


def load_brewfile(path: Path) -> list[PackageIntent]:
    """Read and parse a Brewfile.

    Raises:
        ConfigError: If the file cannot be read.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    intents = parse_brewfile(text)
    logger.info("Loaded %d entries from %s", len(intents), path)
    return intents


def render_brewfile(intents: Iterable[PackageIntent], comment: str | None = None) -> str:
    """Render intents back into Brewfile text (formulas first)."""
    intents = list(intents)
    if comment is None:
        comment = f"Exported Brewfile on {datetime.now():%Y-%m-%d %H:%M:%S}"
    lines = [f"# {comment}"]
    for kind in (PackageKind.FORMULA, PackageKind.CASK):
        for intent in intents:
            if intent.kind == kind:
                lines.append(f"{_KIND_VERB[kind]} '{intent.name}'")
    return "\n".join(lines) + "\n"
