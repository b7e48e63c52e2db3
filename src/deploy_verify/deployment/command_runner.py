"""Shell command execution for deployment stages."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from collections.abc import Callable, Mapping
from pathlib import Path

logger = logging.getLogger(__name__)

CommandRunner = Callable[[tuple[str, ...], Path, Mapping[str, str] | None], None]


class DeploymentError(Exception):
    """Raised when a fatal deployment command fails."""


def run_checked_command(
    command: tuple[str, ...], cwd: Path, extra_env: Mapping[str, str] | None = None
) -> None:
    """Run one stage command and wrap subprocess errors with domain-friendly messages."""
    command_text = shlex.join(command)
    logger.info("Running: %s", command_text)
    env = {**os.environ, **extra_env} if extra_env else None
    try:
        subprocess.run(list(command), cwd=cwd, env=env, check=True)
    except FileNotFoundError as exc:
        raise DeploymentError(f"Command not found: {command_text}") from exc
    except OSError as exc:
        raise DeploymentError(f"Failed to run command {command_text}: {exc}") from exc
    except subprocess.CalledProcessError as exc:
        raise DeploymentError(
            f"Command failed with exit code {exc.returncode}: {command_text}"
        ) from exc


def run_best_effort(
    command_runner: CommandRunner,
    command: tuple[str, ...],
    cwd: Path,
    extra_env: Mapping[str, str] | None = None,
) -> bool:
    """Run a command whose failure must not stop the pipeline."""
    try:
        command_runner(command, cwd, extra_env)
    except DeploymentError as exc:
        logger.warning("Ignoring failure: %s", exc)
        return False
    return True
