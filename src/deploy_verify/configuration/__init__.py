"""Configuration domain exports."""

from .config_scaffold_builder import (
    DEFAULT_CONFIG_FILENAME,
    build_placeholder_configuration,
    write_placeholder_configuration,
)
from .loader import ConfigurationError, load_configuration
from .runtime_settings import (
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

__all__ = [
    "CheckoutSettings",
    "CleanupSettings",
    "Configuration",
    "DeploymentSettings",
    "EndpointSettings",
    "EnvironmentLinks",
    "ImageSettings",
    "ImageSpec",
    "MailSettings",
    "NotificationSettings",
    "ProjectSettings",
    "ReadinessSettings",
    "RegistrySettings",
    "SMTPSettings",
    "VerificationSettings",
    "ConfigurationError",
    "load_configuration",
    "DEFAULT_CONFIG_FILENAME",
    "build_placeholder_configuration",
    "write_placeholder_configuration",
]
