"""Source checkout tests."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

import pytest
from deploy_verify.configuration.runtime_settings import CheckoutSettings
from deploy_verify.deployment import DeploymentError, checkout_source


class RecordingRunner:
    def __init__(self) -> None:
        self.calls: list[tuple[tuple[str, ...], Path]] = []

    def __call__(
        self, command: tuple[str, ...], cwd: Path, extra_env: Mapping[str, str] | None
    ) -> None:
        self.calls.append((command, cwd))


def test_clones_when_no_checkout_exists(tmp_path: Path) -> None:
    workdir = tmp_path / "ci" / "workspace"
    runner = RecordingRunner()
    settings = CheckoutSettings(
        repository="https://example.com/acme/app.git", branch="main", workdir=workdir
    )

    result = checkout_source(settings, run_command=runner)

    assert result == workdir
    assert workdir.parent.is_dir()
    assert runner.calls == [
        (
            (
                "git",
                "clone",
                "--branch",
                "main",
                "https://example.com/acme/app.git",
                str(workdir),
            ),
            workdir.parent,
        )
    ]


def test_refreshes_existing_checkout_in_place(tmp_path: Path) -> None:
    (tmp_path / ".git").mkdir()
    runner = RecordingRunner()
    settings = CheckoutSettings(repository=None, branch="develop", workdir=tmp_path)

    checkout_source(settings, run_command=runner)
    checkout_source(settings, run_command=runner)

    expected = [
        ("git", "fetch", "--prune", "origin", "develop"),
        ("git", "checkout", "develop"),
        ("git", "reset", "--hard", "origin/develop"),
        ("git", "clean", "-fdx"),
    ]
    assert [command for command, _ in runner.calls] == expected * 2
    assert all(cwd == tmp_path for _, cwd in runner.calls)


def test_errors_without_checkout_or_repository(tmp_path: Path) -> None:
    settings = CheckoutSettings(repository=None, branch="main", workdir=tmp_path)

    with pytest.raises(DeploymentError, match="checkout.repository"):
        checkout_source(settings, run_command=RecordingRunner())
