"""Compose-based service startup and post-run cleanup."""

from __future__ import annotations

import logging
from pathlib import Path

from deploy_verify.configuration.runtime_settings import CleanupSettings, DeploymentSettings

from .command_runner import CommandRunner, run_best_effort, run_checked_command

logger = logging.getLogger(__name__)


def compose_command(settings: DeploymentSettings, *arguments: str) -> tuple[str, ...]:
    command = ["docker", "compose", "-f", str(settings.compose_file)]
    if settings.project_name:
        command.extend(["-p", settings.project_name])
    command.extend(arguments)
    return tuple(command)


def start_services(
    settings: DeploymentSettings, *, run_command: CommandRunner | None = None
) -> None:
    """Replace the running deployment with the latest published images.

    Tearing down a deployment that is not running is not an error.
    """
    command_runner = run_command or run_checked_command
    cwd = settings.compose_file.parent
    compose_env = {"COMPOSE_HTTP_TIMEOUT": str(settings.http_timeout_seconds)}

    run_best_effort(command_runner, compose_command(settings, "down"), cwd, compose_env)
    command_runner(compose_command(settings, "pull"), cwd, compose_env)
    command_runner(compose_command(settings, "up", "-d", "--remove-orphans"), cwd, compose_env)
    logger.info("Services started from %s", settings.compose_file)


def run_cleanup(
    settings: CleanupSettings, *, cwd: Path, run_command: CommandRunner | None = None
) -> int:
    """Run post-pipeline cleanup commands; returns how many of them failed."""
    command_runner = run_command or run_checked_command
    failures = 0
    for command in settings.commands:
        if not run_best_effort(command_runner, command, cwd):
            failures += 1
    return failures
