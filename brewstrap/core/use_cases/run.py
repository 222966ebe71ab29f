"""
Run use case — the apply phase of a bootstrap run.

Takes a fully collected RunContext (no more prompts except the one
bulk-retry question) and performs every external effect in order:

    bootstrap Homebrew → filter installed → install plan
        → configure profile → cleanup → health check

Individual install failures never abort; only a package manager that
is still missing after bootstrap does.
"""

from __future__ import annotations

import logging

from brewstrap.adapters.base import PackageManager
from brewstrap.adapters.brew import bootstrap_command
from brewstrap.core.context import RunContext
from brewstrap.core.engine.executor import RetryingExecutor
from brewstrap.core.engine.plan import INSTALL_ATTEMPTS, PlanExecutor, RetryPrompt
from brewstrap.core.errors import PreflightError, ProfileError
from brewstrap.core.services import health
from brewstrap.core.services.environment import configure_environment
from brewstrap.core.services.installed_filter import partition

logger = logging.getLogger(__name__)


def prepare_package_manager(
    ctx: RunContext,
    manager: PackageManager,
    executor: RetryingExecutor,
) -> None:
    """Install Homebrew if needed and refresh its index.

    Raises:
        PreflightError: If the package manager is unavailable afterwards.
    """
    command = bootstrap_command(ctx.settings.use_china_mirror)
    exit_code = executor.execute("Preparing Homebrew", INSTALL_ATTEMPTS, command)
    if exit_code != 0:
        logger.warning("Homebrew preparation exited %d", exit_code)
    if not manager.is_available():
        raise PreflightError("Homebrew is not available after the bootstrap step.")


def apply_plan(
    ctx: RunContext,
    manager: PackageManager,
    executor: RetryingExecutor,
    *,
    confirm_retry: RetryPrompt | None = None,
    bootstrap: bool = True,
    cleanup: bool = True,
) -> RunContext:
    """Execute the collected plan and record every result on ``ctx``."""
    logger.info("Starting execution phase")

    if bootstrap:
        prepare_package_manager(ctx, manager, executor)

    # ── Install ──────────────────────────────────────────────────
    split = partition(ctx.packages.formulas, ctx.packages.casks, manager)
    ctx.report = PlanExecutor(executor, manager).run(
        split.formulas,
        split.casks,
        already_satisfied=split.already_satisfied,
        confirm_retry=confirm_retry,
    )

    # ── Environment ──────────────────────────────────────────────
    if ctx.profile is not None:
        logger.info("Configuring environment variables")
        try:
            ctx.environment = configure_environment(
                ctx.profile,
                ctx.packages.names,
                ctx.settings,
                manager,
                jdk=ctx.jdk,
            )
        except ProfileError as e:
            logger.error("Environment configuration aborted: %s", e)
            ctx.environment_error = str(e)

    # ── Cleanup ──────────────────────────────────────────────────
    if cleanup:
        executor.execute("Cleaning Homebrew cache", 1, manager.cleanup_command())

    # ── Health ───────────────────────────────────────────────────
    ctx.health = health.check(ctx.packages.names, ctx.jdk, executor, profile=ctx.profile)

    logger.info("Run finished with status %s", ctx.report.status)
    return ctx
