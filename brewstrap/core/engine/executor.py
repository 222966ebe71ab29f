"""
Retrying executor — runs one external command with feedback and retries.

This is the SINGLE PLACE where install-type commands are spawned.
Each attempt runs the command as a child process with its combined
output going to a scratch file, while the parent polls the child and
animates a spinner. Attempts are bounded by count, never by time;
the delay between attempts is constant.

Command failures are never raised. ``execute`` returns the exit code
and the run log carries the details.
"""

from __future__ import annotations

import logging
import os
import subprocess
import tempfile
import time
from pathlib import Path
from typing import Callable, Sequence

import click

from brewstrap.core.models.outcome import AttemptRecord
from brewstrap.core.observability.run_log import current_log_path

logger = logging.getLogger(__name__)

SPINNER_CHARS = "⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏"
DEFAULT_TICK = 0.1          # seconds between spinner frames
DEFAULT_BACKOFF = 3.0       # seconds between attempts
SPAWN_FAILURE_EXIT = 127    # same code a shell uses for "command not found"

Command = Sequence[str] | str


class RetryingExecutor:
    """Run commands with a spinner and a bounded, constant-delay retry.

    Args:
        backoff: Seconds to sleep between failed attempts.
        tick: Seconds between spinner frames while a child is alive.
        sleep: Sleep function used for the backoff (injectable for tests).
        popen: Process factory, ``subprocess.Popen`` compatible.
        display: If False, print nothing (log only).
    """

    def __init__(
        self,
        *,
        backoff: float = DEFAULT_BACKOFF,
        tick: float = DEFAULT_TICK,
        sleep: Callable[[float], None] = time.sleep,
        popen: Callable[..., subprocess.Popen] = subprocess.Popen,
        display: bool = True,
    ):
        self._backoff = backoff
        self._tick = tick
        self._sleep = sleep
        self._popen = popen
        self._display = display

    def execute(self, title: str, max_attempts: int, command: Command) -> int:
        """Run ``command`` up to ``max_attempts`` times.

        Stops at the first exit code 0. A ``max_attempts`` of 0 or less
        is treated as 1.

        Returns:
            0 on success, otherwise the last non-zero exit code.
        """
        max_attempts = max(1, max_attempts)
        fd, scratch_name = tempfile.mkstemp(prefix="brewstrap_cmd_", suffix=".log")
        os.close(fd)
        scratch = Path(scratch_name)

        record: AttemptRecord | None = None
        try:
            for attempt in range(1, max_attempts + 1):
                logger.info("Executing (Attempt %d/%d): %s", attempt, max_attempts, title)
                exit_code = self._attempt(title, attempt, max_attempts, command, scratch)
                record = AttemptRecord(
                    title=title,
                    attempt=attempt,
                    max_attempts=max_attempts,
                    exit_code=exit_code,
                    output=_read(scratch),
                )

                if record.ok:
                    self._echo(f"\r[✔] {title}", fg="green", nl=True)
                    logger.info("SUCCESS: %s", title)
                    return 0

                logger.info(
                    "FAILURE (Attempt %d/%d): %s (Exit Code: %d)",
                    attempt, max_attempts, title, exit_code,
                )
                if attempt < max_attempts:
                    self._echo(
                        f"\nAttempt failed, retrying ({attempt + 1}/{max_attempts})...",
                        fg="yellow", nl=True,
                    )
                    self._sleep(self._backoff)

            assert record is not None
            log_path = current_log_path()
            hint = f", see {log_path}" if log_path else ""
            self._echo(
                f"\r[✘] {title} (failed after {max_attempts} attempt(s){hint})",
                fg="red", nl=True,
            )
            logger.info("Command output from last attempt:\n%s", record.output.rstrip())
            return record.exit_code
        finally:
            scratch.unlink(missing_ok=True)

    # ── Internals ──────────────────────────────────────────────

    def _attempt(
        self,
        title: str,
        attempt: int,
        max_attempts: int,
        command: Command,
        scratch: Path,
    ) -> int:
        """Spawn once, animate while alive, return the exit code."""
        use_shell = isinstance(command, str)
        with scratch.open("w", encoding="utf-8") as out:
            try:
                proc = self._popen(
                    command if use_shell else list(command),
                    shell=use_shell,
                    stdout=out,
                    stderr=subprocess.STDOUT,
                    stdin=subprocess.DEVNULL,
                )
            except OSError as e:
                out.write(f"Cannot start command: {e}\n")
                return SPAWN_FAILURE_EXIT

            frame = 0
            while proc.poll() is None:
                char = SPINNER_CHARS[frame % len(SPINNER_CHARS)]
                self._echo(f"\r[{char}] {title} (attempt {attempt}/{max_attempts})", fg="cyan")
                frame += 1
                time.sleep(self._tick)
            return proc.wait()

    def _echo(self, text: str, fg: str, nl: bool = False) -> None:
        if self._display:
            click.secho(text, fg=fg, nl=nl)


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return ""
