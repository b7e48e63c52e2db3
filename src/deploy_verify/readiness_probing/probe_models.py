"""Readiness probing entities."""

from __future__ import annotations

from dataclasses import dataclass

from deploy_verify.configuration.runtime_settings import EndpointSettings


@dataclass(frozen=True)
class ServiceEndpoint:
    """Network endpoint the pipeline waits on before verification."""

    name: str
    url: str
    max_attempts: int = 10
    delay_seconds: float = 10.0

    @staticmethod
    def from_settings(settings: EndpointSettings) -> ServiceEndpoint:
        return ServiceEndpoint(
            name=settings.name,
            url=settings.url,
            max_attempts=settings.max_attempts,
            delay_seconds=settings.delay_seconds,
        )


@dataclass(frozen=True)
class ProbeResult:
    """Successful readiness check for one endpoint."""

    endpoint: ServiceEndpoint
    attempts: int
    detail: str
