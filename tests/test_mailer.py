"""Tests for the SMTP mailer with the network call stubbed."""
import smtplib

import pytest

from core.config import SMTPConfig
from core.exceptions import ServiceError
from tools.mailer import Mailer

CONFIGURED = SMTPConfig(host="smtp.example.com", port=587, user="me@example.com", password="pw", sender="", secure=False)


async def test_unconfigured_mailer_refuses_to_send() -> None:
    mailer = Mailer(SMTPConfig(host="", user="", password=""))
    assert not mailer.can_send()
    with pytest.raises(ServiceError, match="SMTP not configured"):
        await mailer.send("you@example.com", "Hi", "Body")


async def test_send_builds_message() -> None:
    mailer = Mailer(CONFIGURED)
    sent = []
    mailer._send_sync = sent.append

    result = await mailer.send("you@example.com", "Hi", "Body text")
    assert result.sent is True
    assert result.recipient == "you@example.com"
    assert result.message_id == sent[0]["Message-ID"]
    assert sent[0]["From"] == "me@example.com"
    assert sent[0]["Subject"] == "Hi"
    assert sent[0].get_content().strip() == "Body text"


async def test_smtp_failures_become_service_errors() -> None:
    mailer = Mailer(CONFIGURED)

    def fail(message):
        raise smtplib.SMTPAuthenticationError(535, b"bad credentials")

    mailer._send_sync = fail
    with pytest.raises(ServiceError, match="Email sending failed"):
        await mailer.send("you@example.com", "Hi", "Body")
