"""Compose service startup and cleanup tests."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

import pytest
from deploy_verify.configuration.runtime_settings import CleanupSettings, DeploymentSettings
from deploy_verify.deployment import DeploymentError, run_cleanup, start_services


class RecordingRunner:
    def __init__(self, failing: set[str] | None = None) -> None:
        self.calls: list[tuple[tuple[str, ...], Path, Mapping[str, str] | None]] = []
        self.failing = failing or set()

    def __call__(
        self, command: tuple[str, ...], cwd: Path, extra_env: Mapping[str, str] | None
    ) -> None:
        self.calls.append((command, cwd, extra_env))
        if self.failing.intersection(command):
            raise DeploymentError(f"Command failed with exit code 1: {' '.join(command)}")


def _settings(tmp_path: Path, project_name: str | None = None) -> DeploymentSettings:
    return DeploymentSettings(
        compose_file=tmp_path / "docker-compose.yml",
        project_name=project_name,
        http_timeout_seconds=200,
    )


def test_restarts_services_with_compose_timeout(tmp_path: Path) -> None:
    runner = RecordingRunner()

    start_services(_settings(tmp_path, "shop"), run_command=runner)

    compose = ("docker", "compose", "-f", str(tmp_path / "docker-compose.yml"), "-p", "shop")
    assert [command for command, _, _ in runner.calls] == [
        compose + ("down",),
        compose + ("pull",),
        compose + ("up", "-d", "--remove-orphans"),
    ]
    assert all(cwd == tmp_path for _, cwd, _ in runner.calls)
    assert all(env == {"COMPOSE_HTTP_TIMEOUT": "200"} for _, _, env in runner.calls)


def test_teardown_failure_is_ignored(tmp_path: Path) -> None:
    runner = RecordingRunner(failing={"down"})

    start_services(_settings(tmp_path), run_command=runner)

    assert [command[-1] for command, _, _ in runner.calls] == ["down", "pull", "--remove-orphans"]


def test_startup_failure_is_fatal(tmp_path: Path) -> None:
    runner = RecordingRunner(failing={"up"})

    with pytest.raises(DeploymentError):
        start_services(_settings(tmp_path), run_command=runner)


def test_cleanup_runs_every_command_and_counts_failures(tmp_path: Path) -> None:
    runner = RecordingRunner(failing={"prune"})
    settings = CleanupSettings(
        commands=(("docker", "image", "prune", "-f"), ("docker", "builder", "ls"))
    )

    failures = run_cleanup(settings, cwd=tmp_path, run_command=runner)

    assert failures == 1
    assert len(runner.calls) == 2
