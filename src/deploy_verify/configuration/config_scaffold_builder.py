"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "deploy-verify.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Pipeline configuration template for deploy-verify.
# Every section is optional; the values below are the defaults unless marked otherwise.
# Replace <REQUIRED> placeholders in the notification section before running report or run.
# Environment overrides: BASE_URL, HEADLESS, COMPOSE_HTTP_TIMEOUT.

project:
  # Defaults to the CI job name (JOB_NAME).
  # name: "<OPTIONAL>"

checkout:
  # Leave repository unset to build from the current working tree.
  # repository: "<OPTIONAL>"
  branch: "main"
  workdir: "."

images:
  # namespace: "<OPTIONAL>"  # e.g. a Docker Hub user; images become <namespace>/<service>
  services:
    - service: "frontend"
      context: "frontend"
    - service: "backend"
      context: "backend"
    - service: "admin"
      context: "admin"
  # registry:
    # server: "<OPTIONAL>"
    # username: "<OPTIONAL>"
    # password: "<OPTIONAL>"

deployment:
  compose_file: "docker-compose.yml"
  # project_name: "<OPTIONAL>"
  http_timeout_seconds: 200

readiness:
  initial_delay_seconds: 10
  request_timeout_seconds: 5
  max_attempts: 10
  delay_seconds: 10
  endpoints:
    - name: "frontend"
      url: "http://localhost:5173"
    - name: "backend"
      url: "http://localhost:4000"

verification:
  base_url: "http://localhost:5173"
  headless: true
  timeout_seconds: 10
  log_path: "verification-results.log"
  fail_on_scenario_failure: false

notification:
  attach_log: true
  smtp:
    host: "<REQUIRED>"
    port: 587
    # username: "<OPTIONAL>"
    # password: "<OPTIONAL>"
    use_ssl: false
    timeout_seconds: 30
  mail:
    from_address: "<REQUIRED>"
    to_addresses:
      - "<REQUIRED>"
  links:
    frontend: "http://localhost:5173"
    api: "http://localhost:4000"
    admin: "http://localhost:5174"

cleanup:
  commands:
    - ["docker", "image", "prune", "-f"]
"""


def build_placeholder_configuration() -> str:
    """Build a YAML pipeline configuration template with defaults and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the placeholder pipeline configuration template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
