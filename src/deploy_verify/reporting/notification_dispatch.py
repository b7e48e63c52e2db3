"""Outcome notification composition and SMTP sending service."""

from __future__ import annotations

import html
import logging
import smtplib
from email.message import EmailMessage
from email.utils import make_msgid
from pathlib import Path
from typing import Protocol

from deploy_verify.configuration.runtime_settings import (
    MailSettings,
    NotificationSettings,
    SMTPSettings,
)

from .notification_models import DispatchResult, NotificationPayload, PipelineStatus

logger = logging.getLogger(__name__)


class SMTPClient(Protocol):  # pylint: disable=too-few-public-methods
    """Protocol for SMTP clients used by the dispatcher."""

    def send_message(self, settings: SMTPSettings, message: EmailMessage) -> None: ...


class SynchronousSMTPClient:  # pylint: disable=too-few-public-methods
    """Real SMTP client implementation using smtplib."""

    def send_message(self, settings: SMTPSettings, message: EmailMessage) -> None:
        recipients = _collect_recipients(message)
        smtp: smtplib.SMTP
        if settings.use_ssl:
            smtp = smtplib.SMTP_SSL(settings.host, settings.port, timeout=settings.timeout_seconds)
        else:
            smtp = smtplib.SMTP(settings.host, settings.port, timeout=settings.timeout_seconds)
        try:
            smtp.ehlo()
            if settings.use_starttls and not settings.use_ssl:
                smtp.starttls()
                smtp.ehlo()
            if settings.username and settings.password:
                smtp.login(settings.username, settings.password)
            smtp.send_message(message, to_addrs=recipients)
        finally:
            smtp.quit()


def notification_subject(payload: NotificationPayload) -> str:
    label = "SUCCESS" if payload.status == PipelineStatus.SUCCESS else "FAILURE"
    return f"{label}: {payload.build.project_name} - Build {payload.build.build_label}"


def render_notification_text(payload: NotificationPayload) -> str:
    """Render the plain-text notification body."""
    build = payload.build
    heading = (
        "Deployment and verification succeeded."
        if payload.status == PipelineStatus.SUCCESS
        else "Deployment pipeline failed."
    )
    lines = [
        heading,
        "",
        f"Project: {build.project_name}",
        f"Build: {build.build_label}",
        f"Build URL: {build.build_url or 'n/a'}",
        f"Branch: {build.branch or 'n/a'}",
    ]
    if build.revision:
        lines.append(f"Revision: {build.revision}")
    if payload.failure_reason:
        lines.append(f"Reason: {payload.failure_reason}")
    lines.extend(
        [
            "",
            "Verification results:",
            f"  Passing: {payload.passing}",
            f"  Failing: {payload.failing}",
            "",
            "Scenarios:",
        ]
    )
    lines.extend(f"  {index}. {name}" for index, name in enumerate(payload.scenario_names, 1))
    links = payload.links
    lines.extend(
        [
            "",
            "Environment:",
            f"  Frontend: {links.frontend or 'n/a'}",
            f"  API: {links.api or 'n/a'}",
            f"  Admin: {links.admin or 'n/a'}",
        ]
    )
    if build.build_url:
        lines.extend(["", f"Console output: {build.build_url.rstrip('/')}/console"])
    if payload.log_text is not None:
        lines.extend(["", "Verification log:", payload.log_text])
    return "\n".join(lines)


def _render_html_body(plain_text: str) -> str:
    return f"<html><body><pre>{html.escape(plain_text)}</pre></body></html>"


def compose_notification(
    payload: NotificationPayload,
    mail_settings: MailSettings,
    *,
    attachment_path: Path | None = None,
) -> EmailMessage:
    """Build the notification message, attaching the log file when it exists."""
    message = EmailMessage()
    message["Message-ID"] = make_msgid()
    message["From"] = mail_settings.from_address
    message["To"] = ", ".join(mail_settings.to_addresses)
    if mail_settings.cc:
        message["Cc"] = ", ".join(mail_settings.cc)
    message["Subject"] = notification_subject(payload)

    body_text = render_notification_text(payload)
    message.set_content(body_text)
    message.add_alternative(_render_html_body(body_text), subtype="html")

    if attachment_path is not None and attachment_path.is_file():
        message.add_attachment(
            attachment_path.read_bytes(),
            maintype="text",
            subtype="plain",
            filename=attachment_path.name,
        )
    return message


class NotificationDispatcher:  # pylint: disable=too-few-public-methods
    """Best-effort sender: failures are logged and reported, never raised."""

    def __init__(
        self,
        smtp_client: SMTPClient,
        settings: NotificationSettings,
    ) -> None:
        self._smtp_client = smtp_client
        self._settings = settings

    def dispatch(
        self, payload: NotificationPayload, *, log_path: Path | None = None
    ) -> DispatchResult:
        attachment = log_path if self._settings.attach_log else None
        try:
            message = compose_notification(payload, self._settings.mail, attachment_path=attachment)
            self._smtp_client.send_message(self._settings.smtp, message)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Failed to send %s notification: %s", payload.status.value, exc)
            return DispatchResult.failed(exc)
        logger.info("Sent %s notification", payload.status.value)
        return DispatchResult.sent()


def _collect_recipients(message: EmailMessage) -> list[str]:
    recipients = []
    for header in ("To", "Cc", "Bcc"):
        if header in message:
            recipients.extend(
                [address.strip() for address in message[header].split(",") if address.strip()]
            )
    return recipients
