"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

DEFAULT_BASE_URL = "http://localhost:5173"
DEFAULT_COMPOSE_HTTP_TIMEOUT = 200


@dataclass(frozen=True)
class ProjectSettings:
    """Project identity used in notifications."""

    name: str | None


@dataclass(frozen=True)
class CheckoutSettings:
    """Source checkout location."""

    repository: str | None
    branch: str
    workdir: Path


@dataclass(frozen=True)
class ImageSpec:
    """One container image built from a sub-service directory."""

    service: str
    repository: str
    context: Path


@dataclass(frozen=True)
class RegistrySettings:
    """Container registry credentials."""

    server: str | None
    username: str | None
    password: str | None


@dataclass(frozen=True)
class ImageSettings:
    """Image build and publish configuration."""

    images: tuple[ImageSpec, ...]
    registry: RegistrySettings


@dataclass(frozen=True)
class DeploymentSettings:
    """Compose-based service startup configuration."""

    compose_file: Path
    project_name: str | None
    http_timeout_seconds: int


@dataclass(frozen=True)
class EndpointSettings:
    """Readiness endpoint declared in configuration."""

    name: str
    url: str
    max_attempts: int
    delay_seconds: float


@dataclass(frozen=True)
class ReadinessSettings:
    """Readiness gate configuration."""

    initial_delay_seconds: float
    request_timeout_seconds: float
    endpoints: tuple[EndpointSettings, ...]


@dataclass(frozen=True)
class VerificationSettings:
    """Browser verification run configuration."""

    base_url: str
    headless: bool
    timeout_seconds: int
    log_path: Path
    fail_on_scenario_failure: bool


@dataclass(frozen=True)
class SMTPSettings:  # pylint: disable=too-many-instance-attributes
    """SMTP server connectivity configuration."""

    host: str
    port: int
    username: str | None
    password: str | None
    use_starttls: bool
    use_ssl: bool
    timeout_seconds: int


@dataclass(frozen=True)
class MailSettings:
    """Notification mailbox configuration."""

    from_address: str
    to_addresses: tuple[str, ...]
    cc: tuple[str, ...]


@dataclass(frozen=True)
class EnvironmentLinks:
    """Links to the deployed environment rendered into notifications."""

    frontend: str | None
    api: str | None
    admin: str | None


@dataclass(frozen=True)
class NotificationSettings:
    """Outcome notification configuration."""

    smtp: SMTPSettings
    mail: MailSettings
    links: EnvironmentLinks
    attach_log: bool


@dataclass(frozen=True)
class CleanupSettings:
    """Best-effort commands run after the pipeline finishes."""

    commands: tuple[tuple[str, ...], ...]


@dataclass(frozen=True)
class Configuration:  # pylint: disable=too-many-instance-attributes
    """Top-level configuration aggregate."""

    path: Path | None
    project: ProjectSettings
    checkout: CheckoutSettings
    images: ImageSettings
    deployment: DeploymentSettings
    readiness: ReadinessSettings
    verification: VerificationSettings
    notification: NotificationSettings | None
    cleanup: CleanupSettings
