"""Configuration scaffold builder tests."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from deploy_verify.configuration.config_scaffold_builder import (
    build_placeholder_configuration,
    write_placeholder_configuration,
)
from deploy_verify.configuration.loader import load_configuration


def test_build_placeholder_configuration_contains_all_supported_sections() -> None:
    scaffold = build_placeholder_configuration()

    assert "Pipeline configuration template" in scaffold
    for section in (
        "project:",
        "checkout:",
        "images:",
        "deployment:",
        "readiness:",
        "verification:",
        "notification:",
        "cleanup:",
    ):
        assert section in scaffold
    assert "<REQUIRED>" in scaffold
    assert "<OPTIONAL>" in scaffold
    assert "BASE_URL, HEADLESS, COMPOSE_HTTP_TIMEOUT" in scaffold


def test_placeholder_configuration_is_valid_yaml_that_loads(tmp_path: Path) -> None:
    output_path = write_placeholder_configuration(tmp_path / "deploy-verify.yaml")

    assert isinstance(yaml.safe_load(output_path.read_text(encoding="utf-8")), dict)
    configuration = load_configuration(output_path, environ={})
    assert len(configuration.images.images) == 3
    assert configuration.notification is not None
    assert configuration.notification.links.admin == "http://localhost:5174"


def test_write_placeholder_configuration_fails_when_file_exists(tmp_path: Path) -> None:
    output_path = tmp_path / "deploy-verify.yaml"
    output_path.write_text("existing", encoding="utf-8")

    with pytest.raises(FileExistsError):
        write_placeholder_configuration(output_path)
