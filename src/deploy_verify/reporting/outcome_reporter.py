"""Reporting stage entry point."""

from __future__ import annotations

from pathlib import Path

from deploy_verify.build_metadata import BuildContext
from deploy_verify.configuration.runtime_settings import NotificationSettings
from deploy_verify.verification.scenario_catalog import SCENARIO_NAMES

from .log_summary import read_log_summary
from .notification_dispatch import NotificationDispatcher, SMTPClient, SynchronousSMTPClient
from .notification_models import DispatchResult, PipelineStatus, build_notification_payload


def report_outcome(
    status: PipelineStatus,
    *,
    settings: NotificationSettings,
    build: BuildContext,
    log_path: Path,
    failure_reason: str | None = None,
    smtp_client: SMTPClient | None = None,
) -> DispatchResult:
    """Send the one notification for a finished run.

    ``status`` is the pipeline's own terminal state; the counts read from the
    log are reported as they are and never change which notification is sent.
    """
    summary = read_log_summary(log_path)
    payload = build_notification_payload(
        status,
        build,
        summary,
        scenario_names=SCENARIO_NAMES,
        links=settings.links,
        failure_reason=failure_reason,
    )
    dispatcher = NotificationDispatcher(smtp_client or SynchronousSMTPClient(), settings)
    return dispatcher.dispatch(payload, log_path=log_path)
