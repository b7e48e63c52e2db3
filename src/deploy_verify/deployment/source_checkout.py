"""Idempotent source checkout."""

from __future__ import annotations

import logging
from pathlib import Path

from deploy_verify.configuration.runtime_settings import CheckoutSettings

from .command_runner import CommandRunner, DeploymentError, run_checked_command

logger = logging.getLogger(__name__)


def checkout_source(
    settings: CheckoutSettings, *, run_command: CommandRunner | None = None
) -> Path:
    """Bring ``settings.workdir`` to the tip of the configured branch.

    An existing clone is refreshed in place (fetch, hard reset, clean) so it
    converges to the same tree a fresh clone would produce. Without a clone the
    repository is cloned into the working directory.
    """
    command_runner = run_command or run_checked_command
    workdir = settings.workdir
    branch = settings.branch
    if (workdir / ".git").exists():
        logger.info("Refreshing existing checkout in %s (branch %s)", workdir, branch)
        command_runner(("git", "fetch", "--prune", "origin", branch), workdir, None)
        command_runner(("git", "checkout", branch), workdir, None)
        command_runner(("git", "reset", "--hard", f"origin/{branch}"), workdir, None)
        command_runner(("git", "clean", "-fdx"), workdir, None)
        return workdir

    if not settings.repository:
        raise DeploymentError(
            f"No git checkout found in {workdir} and checkout.repository is not configured."
        )
    logger.info("Cloning %s (branch %s) into %s", settings.repository, branch, workdir)
    workdir.parent.mkdir(parents=True, exist_ok=True)
    command_runner(
        ("git", "clone", "--branch", branch, settings.repository, str(workdir)),
        workdir.parent,
        None,
    )
    return workdir
