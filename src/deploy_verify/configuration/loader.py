"""Configuration loader service."""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from .runtime_settings import (
    DEFAULT_BASE_URL,
    DEFAULT_COMPOSE_HTTP_TIMEOUT,
    CheckoutSettings,
    CleanupSettings,
    Configuration,
    DeploymentSettings,
    EndpointSettings,
    EnvironmentLinks,
    ImageSettings,
    ImageSpec,
    MailSettings,
    NotificationSettings,
    ProjectSettings,
    ReadinessSettings,
    RegistrySettings,
    SMTPSettings,
    VerificationSettings,
)

_DEFAULT_IMAGES = (
    ("frontend", "frontend"),
    ("backend", "backend"),
    ("admin", "admin"),
)
_DEFAULT_ENDPOINTS = (
    ("frontend", "http://localhost:5173"),
    ("backend", "http://localhost:4000"),
)
_DEFAULT_CLEANUP = (("docker", "image", "prune", "-f"),)
_FALSE_VALUES = {"0", "false", "no", "off"}


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(
    config_path: Path | str | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> Configuration:
    """Load and validate the configuration file, applying environment overrides.

    Every section is optional. Without a file the defaults describe a local
    compose deployment with the frontend on port 5173 and the API on port 4000.
    """
    env = os.environ if environ is None else environ
    path: Path | None = None
    parsed: Any = {}
    if config_path is not None:
        path = Path(config_path)
        if not path.exists():
            raise ConfigurationError(f"Configuration file not found: {path}")
        text = path.read_text(encoding="utf-8")
        try:
            parsed = yaml.safe_load(text)
        except yaml.YAMLError as exc:  # pragma: no cover - exercised indirectly
            raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc
        if parsed is None:
            parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    base_path = path.parent.resolve() if path else Path.cwd()
    project = _parse_project_section(parsed.get("project"))
    return Configuration(
        path=path,
        project=project,
        checkout=_parse_checkout_section(parsed.get("checkout"), base_path),
        images=_parse_images_section(parsed.get("images"), base_path),
        deployment=_parse_deployment_section(parsed.get("deployment"), base_path, env),
        readiness=_parse_readiness_section(parsed.get("readiness")),
        verification=_parse_verification_section(parsed.get("verification"), base_path, env),
        notification=_parse_notification_section(parsed.get("notification")),
        cleanup=_parse_cleanup_section(parsed.get("cleanup")),
    )


def _parse_project_section(value: Any) -> ProjectSettings:
    section = _optional_mapping(value, "project")
    name = _optional_string(section.get("name"), "project.name")
    return ProjectSettings(name=name)


def _parse_checkout_section(value: Any, base_path: Path) -> CheckoutSettings:
    section = _optional_mapping(value, "checkout")
    repository = _optional_string(section.get("repository"), "checkout.repository")
    branch = _optional_string(section.get("branch"), "checkout.branch") or "main"
    workdir = _optional_string(section.get("workdir"), "checkout.workdir") or "."
    return CheckoutSettings(
        repository=repository,
        branch=branch,
        workdir=_resolve_path(base_path, workdir),
    )


def _parse_images_section(value: Any, base_path: Path) -> ImageSettings:
    section = _optional_mapping(value, "images")
    namespace = _optional_string(section.get("namespace"), "images.namespace")
    raw_services = section.get("services")
    if raw_services is None:
        raw_services = [{"service": name, "context": context} for name, context in _DEFAULT_IMAGES]
    if not isinstance(raw_services, Sequence) or isinstance(raw_services, str):
        raise ConfigurationError("images.services must be a list of mappings.")

    images: list[ImageSpec] = []
    for index, entry in enumerate(raw_services):
        label = f"images.services[{index}]"
        mapping = _require_mapping(entry, label)
        service = _require_non_empty_string(mapping.get("service"), f"{label}.service")
        repository = _optional_string(mapping.get("repository"), f"{label}.repository")
        if repository is None:
            repository = f"{namespace}/{service}" if namespace else service
        context = _optional_string(mapping.get("context"), f"{label}.context") or service
        images.append(
            ImageSpec(
                service=service,
                repository=repository,
                context=_resolve_path(base_path, context),
            )
        )
    if len({image.service for image in images}) != len(images):
        raise ConfigurationError("images.services entries must have unique service names.")

    registry = _optional_mapping(section.get("registry"), "images.registry")
    return ImageSettings(
        images=tuple(images),
        registry=RegistrySettings(
            server=_optional_string(registry.get("server"), "images.registry.server"),
            username=_optional_string(registry.get("username"), "images.registry.username"),
            password=_optional_string(registry.get("password"), "images.registry.password"),
        ),
    )


def _parse_deployment_section(
    value: Any, base_path: Path, env: Mapping[str, str]
) -> DeploymentSettings:
    section = _optional_mapping(value, "deployment")
    compose_file = (
        _optional_string(section.get("compose_file"), "deployment.compose_file")
        or "docker-compose.yml"
    )
    timeout_value: Any = section.get("http_timeout_seconds", DEFAULT_COMPOSE_HTTP_TIMEOUT)
    if env.get("COMPOSE_HTTP_TIMEOUT"):
        timeout_value = _env_int(env["COMPOSE_HTTP_TIMEOUT"], "COMPOSE_HTTP_TIMEOUT")
    return DeploymentSettings(
        compose_file=_resolve_path(base_path, compose_file),
        project_name=_optional_string(section.get("project_name"), "deployment.project_name"),
        http_timeout_seconds=_require_positive_int(
            timeout_value, "deployment.http_timeout_seconds"
        ),
    )


def _parse_readiness_section(value: Any) -> ReadinessSettings:
    section = _optional_mapping(value, "readiness")
    max_attempts = _require_positive_int(
        section.get("max_attempts", 10), "readiness.max_attempts"
    )
    delay_seconds = _require_non_negative_number(
        section.get("delay_seconds", 10), "readiness.delay_seconds"
    )
    raw_endpoints = section.get("endpoints")
    if raw_endpoints is None:
        raw_endpoints = [{"name": name, "url": url} for name, url in _DEFAULT_ENDPOINTS]
    if not isinstance(raw_endpoints, Sequence) or isinstance(raw_endpoints, str):
        raise ConfigurationError("readiness.endpoints must be a list of mappings.")

    endpoints: list[EndpointSettings] = []
    for index, entry in enumerate(raw_endpoints):
        label = f"readiness.endpoints[{index}]"
        mapping = _require_mapping(entry, label)
        endpoints.append(
            EndpointSettings(
                name=_require_non_empty_string(mapping.get("name"), f"{label}.name"),
                url=_require_url(mapping.get("url"), f"{label}.url"),
                max_attempts=_require_positive_int(
                    mapping.get("max_attempts", max_attempts), f"{label}.max_attempts"
                ),
                delay_seconds=_require_non_negative_number(
                    mapping.get("delay_seconds", delay_seconds), f"{label}.delay_seconds"
                ),
            )
        )
    return ReadinessSettings(
        initial_delay_seconds=_require_non_negative_number(
            section.get("initial_delay_seconds", 10), "readiness.initial_delay_seconds"
        ),
        request_timeout_seconds=_require_positive_number(
            section.get("request_timeout_seconds", 5), "readiness.request_timeout_seconds"
        ),
        endpoints=tuple(endpoints),
    )


def _parse_verification_section(
    value: Any, base_path: Path, env: Mapping[str, str]
) -> VerificationSettings:
    section = _optional_mapping(value, "verification")
    base_url = env.get("BASE_URL") or section.get("base_url", DEFAULT_BASE_URL)
    headless: Any = section.get("headless", True)
    if "HEADLESS" in env:
        headless = env["HEADLESS"].strip().lower() not in _FALSE_VALUES
    if not isinstance(headless, bool):
        raise ConfigurationError("verification.headless must be a boolean.")
    log_path = (
        _optional_string(section.get("log_path"), "verification.log_path")
        or "verification-results.log"
    )
    return VerificationSettings(
        base_url=_require_url(base_url, "verification.base_url").rstrip("/"),
        headless=headless,
        timeout_seconds=_require_positive_int(
            section.get("timeout_seconds", 10), "verification.timeout_seconds"
        ),
        log_path=_resolve_path(base_path, log_path),
        fail_on_scenario_failure=_require_bool(
            section.get("fail_on_scenario_failure", False),
            "verification.fail_on_scenario_failure",
        ),
    )


def _parse_notification_section(value: Any) -> NotificationSettings | None:
    if value is None:
        return None
    section = _require_mapping(value, "notification")
    links = _optional_mapping(section.get("links"), "notification.links")
    return NotificationSettings(
        smtp=_parse_smtp_section(section.get("smtp")),
        mail=_parse_mail_section(section.get("mail")),
        links=EnvironmentLinks(
            frontend=_optional_string(links.get("frontend"), "notification.links.frontend"),
            api=_optional_string(links.get("api"), "notification.links.api"),
            admin=_optional_string(links.get("admin"), "notification.links.admin"),
        ),
        attach_log=_require_bool(section.get("attach_log", True), "notification.attach_log"),
    )


def _parse_smtp_section(value: Any) -> SMTPSettings:
    section = _require_mapping(value, "notification.smtp")
    host = _require_non_empty_string(section.get("host"), "notification.smtp.host")
    port = _require_positive_int(section.get("port"), "notification.smtp.port")
    username = _optional_string(section.get("username"), "notification.smtp.username")
    password = _optional_string(section.get("password"), "notification.smtp.password")
    use_ssl = bool(section.get("use_ssl", False))
    use_starttls = section.get("use_starttls")
    use_starttls_bool = not use_ssl if use_starttls is None else bool(use_starttls)
    timeout_seconds = _require_positive_int(
        section.get("timeout_seconds", 30), "notification.smtp.timeout_seconds"
    )
    return SMTPSettings(
        host=host,
        port=port,
        username=username,
        password=password,
        use_starttls=use_starttls_bool,
        use_ssl=use_ssl,
        timeout_seconds=timeout_seconds,
    )


def _parse_mail_section(value: Any) -> MailSettings:
    section = _require_mapping(value, "notification.mail")
    from_address = _require_non_empty_string(
        section.get("from_address"), "notification.mail.from_address"
    )
    to_addresses = _normalize_string_sequence(
        section.get("to_addresses"), "notification.mail.to_addresses"
    )
    if not to_addresses:
        raise ConfigurationError("notification.mail.to_addresses must not be empty.")
    cc = _normalize_string_sequence(section.get("cc"), "notification.mail.cc")
    return MailSettings(from_address=from_address, to_addresses=to_addresses, cc=cc)


def _parse_cleanup_section(value: Any) -> CleanupSettings:
    section = _optional_mapping(value, "cleanup")
    raw_commands = section.get("commands")
    if raw_commands is None:
        return CleanupSettings(commands=_DEFAULT_CLEANUP)
    if not isinstance(raw_commands, Sequence) or isinstance(raw_commands, str):
        raise ConfigurationError("cleanup.commands must be a list of argument lists.")
    commands = []
    for index, entry in enumerate(raw_commands):
        arguments = _normalize_string_sequence(entry, f"cleanup.commands[{index}]")
        if not arguments:
            raise ConfigurationError(f"cleanup.commands[{index}] must not be empty.")
        commands.append(arguments)
    return CleanupSettings(commands=tuple(commands))


def _normalize_string_sequence(value: Any, field_name: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        stripped = value.strip()
        return (stripped,) if stripped else ()
    if isinstance(value, Sequence):
        normalized = []
        for item in value:
            if not isinstance(item, str):
                raise ConfigurationError(f"{field_name} entries must be strings.")
            stripped = item.strip()
            if stripped:
                normalized.append(stripped)
        return tuple(normalized)
    raise ConfigurationError(f"{field_name} must be a string or list of strings.")


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path)
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _env_int(value: str, name: str) -> int:
    try:
        return int(value.strip())
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer.") from exc


def _optional_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    return _require_mapping(value, section_name)


def _require_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' must be a mapping.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _require_url(value: Any, field_name: str) -> str:
    url = _require_non_empty_string(value, field_name)
    if not url.startswith(("http://", "https://")):
        raise ConfigurationError(f"{field_name} must be an http(s) URL.")
    return url


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    return stripped or None


def _require_bool(value: Any, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be a boolean.")
    return value


def _require_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if value <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return value


def _require_non_negative_number(value: Any, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ConfigurationError(f"{field_name} must be a number.")
    if value < 0:
        raise ConfigurationError(f"{field_name} must not be negative.")
    return float(value)


def _require_positive_number(value: Any, field_name: str) -> float:
    number = _require_non_negative_number(value, field_name)
    if number == 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return number
