"""Reporting domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

from deploy_verify.build_metadata import BuildContext
from deploy_verify.configuration.runtime_settings import EnvironmentLinks

from .log_summary import LogSummary


class PipelineStatus(str, Enum):
    """Terminal pipeline state a notification reports."""

    SUCCESS = "success"
    FAILURE = "failure"


class DispatchStatus(str, Enum):
    """Notification dispatch outcome."""

    SENT = "sent"
    FAILED = "failed"


@dataclass(frozen=True)
class NotificationPayload:  # pylint: disable=too-many-instance-attributes
    """Everything rendered into one outcome notification."""

    status: PipelineStatus
    build: BuildContext
    passing: int
    failing: int
    scenario_names: tuple[str, ...]
    links: EnvironmentLinks
    log_text: str | None
    failure_reason: str | None = None


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of attempting to send a notification."""

    status: DispatchStatus
    sent_at: datetime | None
    error_message: str | None

    @staticmethod
    def sent() -> DispatchResult:
        return DispatchResult(
            status=DispatchStatus.SENT,
            sent_at=datetime.now(UTC),
            error_message=None,
        )

    @staticmethod
    def failed(error: Exception) -> DispatchResult:
        return DispatchResult(
            status=DispatchStatus.FAILED,
            sent_at=None,
            error_message=str(error),
        )


def build_notification_payload(
    status: PipelineStatus,
    build: BuildContext,
    summary: LogSummary,
    *,
    scenario_names: tuple[str, ...],
    links: EnvironmentLinks,
    failure_reason: str | None = None,
) -> NotificationPayload:
    """Assemble the payload; the raw log is embedded only for failures."""
    return NotificationPayload(
        status=status,
        build=build,
        passing=summary.passing,
        failing=summary.failing,
        scenario_names=scenario_names,
        links=links,
        log_text=summary.text if status == PipelineStatus.FAILURE else None,
        failure_reason=failure_reason,
    )
