"""
Run log — the append-only, human-readable record of every run.

One file per day (``brewstrap-YYYY-MM-DD.log`` in the working
directory, or ``$BREWSTRAP_LOG_FILE``). Each run appends a boundary
marker and then every attempt, success and failure event as a
timestamped line. The file is never truncated or rotated here.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)

# Events from every ``brewstrap.*`` module land in the run log.
RUN_LOGGER = "brewstrap"

_FMT_RUN = "[%(asctime)s] %(message)s"
_DATEFMT_RUN = "%Y-%m-%d %H:%M:%S"

_handler: logging.FileHandler | None = None


def default_log_path(directory: Path | None = None) -> Path:
    """Resolve the run log path from env or today's date."""
    env_path = os.environ.get("BREWSTRAP_LOG_FILE")
    if env_path:
        return Path(env_path).expanduser()
    name = f"brewstrap-{datetime.now():%Y-%m-%d}.log"
    return (directory or Path.cwd()) / name


def open_run_log(path: Path | None = None) -> Path:
    """Attach the run log handler and write the run-boundary marker.

    Calling it again closes the previous handler first.

    Returns:
        The resolved log file path.
    """
    global _handler
    close_run_log()

    path = path or default_log_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    stamp = datetime.now().strftime(_DATEFMT_RUN)
    with path.open("a", encoding="utf-8") as f:
        f.write(f"\n\n==================== New Run at {stamp} ====================\n")

    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter(_FMT_RUN, datefmt=_DATEFMT_RUN))

    run_logger = logging.getLogger(RUN_LOGGER)
    run_logger.addHandler(handler)
    if run_logger.getEffectiveLevel() > logging.INFO:
        run_logger.setLevel(logging.INFO)

    _handler = handler
    logger.info("Run log initialized at %s", path)
    return path


def close_run_log() -> None:
    """Detach and close the run log handler, if any."""
    global _handler
    if _handler is None:
        return
    logging.getLogger(RUN_LOGGER).removeHandler(_handler)
    _handler.close()
    _handler = None


def current_log_path() -> Path | None:
    """Path of the open run log, or None."""
    if _handler is None:
        return None
    return Path(_handler.baseFilename)
