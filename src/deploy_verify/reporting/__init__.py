"""Outcome reporting exports."""

from .log_summary import LOG_PLACEHOLDER, LogSummary, read_log_summary, summarize_log_text
from .notification_dispatch import (
    NotificationDispatcher,
    SynchronousSMTPClient,
    compose_notification,
    notification_subject,
    render_notification_text,
)
from .notification_models import (
    DispatchResult,
    DispatchStatus,
    NotificationPayload,
    PipelineStatus,
    build_notification_payload,
)
from .outcome_reporter import report_outcome

__all__ = [
    "LOG_PLACEHOLDER",
    "LogSummary",
    "read_log_summary",
    "summarize_log_text",
    "NotificationDispatcher",
    "SynchronousSMTPClient",
    "compose_notification",
    "notification_subject",
    "render_notification_text",
    "DispatchResult",
    "DispatchStatus",
    "NotificationPayload",
    "PipelineStatus",
    "build_notification_payload",
    "report_outcome",
]
