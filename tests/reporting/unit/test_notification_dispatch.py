"""Notification composition and sending tests."""

from __future__ import annotations

import smtplib
from email.message import EmailMessage, Message
from pathlib import Path

import pytest
from deploy_verify.build_metadata import resolve_build_context
from deploy_verify.configuration.runtime_settings import (
    EnvironmentLinks,
    MailSettings,
    NotificationSettings,
    SMTPSettings,
)
from deploy_verify.reporting import (
    DispatchStatus,
    NotificationDispatcher,
    PipelineStatus,
    SynchronousSMTPClient,
    build_notification_payload,
    compose_notification,
    summarize_log_text,
)

LOG_TEXT = "  9 passing\n  1 failing\n  0 pending\n"


def _smtp_settings(use_ssl: bool = False, use_starttls: bool = True) -> SMTPSettings:
    return SMTPSettings(
        host="smtp.example.com",
        port=587,
        username="user",
        password="secret",
        use_starttls=use_starttls,
        use_ssl=use_ssl,
        timeout_seconds=30,
    )


def _mail_settings() -> MailSettings:
    return MailSettings(
        from_address="ci@example.com",
        to_addresses=("qa@example.com", "dev@example.com"),
        cc=("lead@example.com",),
    )


def _links() -> EnvironmentLinks:
    return EnvironmentLinks(
        frontend="http://localhost:5173", api="http://localhost:4000", admin=None
    )


def _notification_settings(attach_log: bool = True) -> NotificationSettings:
    return NotificationSettings(
        smtp=_smtp_settings(), mail=_mail_settings(), links=_links(), attach_log=attach_log
    )


def _payload(status: PipelineStatus, failure_reason: str | None = None):
    build = resolve_build_context(
        "food-delivery",
        environ={"BUILD_NUMBER": "42", "BUILD_URL": "https://ci.example.com/job/app/42/"},
    )
    return build_notification_payload(
        status,
        build,
        summarize_log_text(LOG_TEXT),
        scenario_names=("Homepage", "Login"),
        links=_links(),
        failure_reason=failure_reason,
    )


def _part_text(part: Message) -> str:
    payload = part.get_payload(decode=True)
    assert isinstance(payload, bytes)
    return payload.decode(part.get_content_charset() or "utf-8")


def test_success_notification_omits_log_body() -> None:
    message = compose_notification(_payload(PipelineStatus.SUCCESS), _mail_settings())

    assert message["Subject"] == "SUCCESS: food-delivery - Build #42"
    assert message["To"] == "qa@example.com, dev@example.com"
    assert message["Cc"] == "lead@example.com"
    body = _part_text(next(message.iter_parts()))
    assert "Passing: 9" in body
    assert "Failing: 1" in body
    assert "  1. Homepage\n  2. Login" in body
    assert "Frontend: http://localhost:5173" in body
    assert "Admin: n/a" in body
    assert "Console output: https://ci.example.com/job/app/42/console" in body
    assert "Verification log:" not in body


def test_failure_notification_embeds_reason_and_log() -> None:
    payload = _payload(PipelineStatus.FAILURE, "Service 'backend' did not become ready")

    message = compose_notification(payload, _mail_settings())

    assert message["Subject"] == "FAILURE: food-delivery - Build #42"
    payloads = {part.get_content_type(): _part_text(part) for part in message.iter_parts()}
    assert "Reason: Service 'backend' did not become ready" in payloads["text/plain"]
    assert "Verification log:\n  9 passing" in payloads["text/plain"]
    assert "Service &#x27;backend&#x27;" in payloads["text/html"]


def test_attaches_existing_log_file(tmp_path: Path) -> None:
    log_path = tmp_path / "verification.log"
    log_path.write_text(LOG_TEXT, encoding="utf-8")

    message = compose_notification(
        _payload(PipelineStatus.SUCCESS), _mail_settings(), attachment_path=log_path
    )

    attachments = list(message.iter_attachments())
    assert [a.get_filename() for a in attachments] == ["verification.log"]
    assert _part_text(attachments[0]) == LOG_TEXT


def test_skips_attachment_when_log_file_is_missing(tmp_path: Path) -> None:
    message = compose_notification(
        _payload(PipelineStatus.FAILURE),
        _mail_settings(),
        attachment_path=tmp_path / "missing.log",
    )

    assert list(message.iter_attachments()) == []


class FakeSMTPClient:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.sent: list[EmailMessage] = []

    def send_message(self, settings: SMTPSettings, message: EmailMessage) -> None:
        if self.error is not None:
            raise self.error
        self.sent.append(message)


def test_dispatcher_reports_sent(tmp_path: Path) -> None:
    client = FakeSMTPClient()
    dispatcher = NotificationDispatcher(client, _notification_settings())

    result = dispatcher.dispatch(_payload(PipelineStatus.SUCCESS), log_path=tmp_path / "x.log")

    assert result.status == DispatchStatus.SENT
    assert result.sent_at is not None
    assert len(client.sent) == 1


@pytest.mark.parametrize(
    "error",
    [smtplib.SMTPAuthenticationError(535, b"bad credentials"), ConnectionRefusedError("refused")],
)
def test_dispatcher_swallows_transport_failures(error: Exception) -> None:
    dispatcher = NotificationDispatcher(FakeSMTPClient(error), _notification_settings())

    result = dispatcher.dispatch(_payload(PipelineStatus.FAILURE))

    assert result.status == DispatchStatus.FAILED
    assert result.error_message


class _FakeSmtpSession:
    def __init__(self, host: str, port: int, timeout: int) -> None:
        self.host = host
        self.port = port
        self.timeout = timeout
        self.actions: list[object] = []
        self.sent_to_addrs: list[str] | None = None

    def ehlo(self) -> None:
        self.actions.append("ehlo")

    def starttls(self) -> None:
        self.actions.append("starttls")

    def login(self, username: str, password: str) -> None:
        self.actions.append(("login", username, password))

    def send_message(self, message: EmailMessage, to_addrs: list[str]) -> None:
        self.actions.append("send_message")
        self.sent_to_addrs = to_addrs

    def quit(self) -> None:
        self.actions.append("quit")


def test_synchronous_smtp_client_uses_starttls_login_and_all_recipients(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    sessions: list[_FakeSmtpSession] = []

    def smtp_factory(host: str, port: int, timeout: int) -> _FakeSmtpSession:
        session = _FakeSmtpSession(host, port, timeout)
        sessions.append(session)
        return session

    monkeypatch.setattr("deploy_verify.reporting.notification_dispatch.smtplib.SMTP", smtp_factory)
    message = compose_notification(_payload(PipelineStatus.SUCCESS), _mail_settings())

    SynchronousSMTPClient().send_message(_smtp_settings(), message)

    session = sessions[0]
    assert (session.host, session.port, session.timeout) == ("smtp.example.com", 587, 30)
    assert session.actions == [
        "ehlo",
        "starttls",
        "ehlo",
        ("login", "user", "secret"),
        "send_message",
        "quit",
    ]
    assert session.sent_to_addrs == ["qa@example.com", "dev@example.com", "lead@example.com"]


def test_synchronous_smtp_client_uses_ssl_without_starttls(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    sessions: list[_FakeSmtpSession] = []

    def smtp_ssl_factory(host: str, port: int, timeout: int) -> _FakeSmtpSession:
        session = _FakeSmtpSession(host, port, timeout)
        sessions.append(session)
        return session

    monkeypatch.setattr(
        "deploy_verify.reporting.notification_dispatch.smtplib.SMTP_SSL", smtp_ssl_factory
    )
    message = compose_notification(_payload(PipelineStatus.SUCCESS), _mail_settings())

    SynchronousSMTPClient().send_message(_smtp_settings(use_ssl=True), message)

    assert sessions[0].actions == ["ehlo", ("login", "user", "secret"), "send_message", "quit"]
