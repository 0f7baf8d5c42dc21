"""Outgoing email over SMTP."""
import asyncio
import logging
import smtplib
from email.message import EmailMessage
from email.utils import make_msgid
from typing import Optional

from pydantic import BaseModel

from core.config import SMTPConfig, config
from core.exceptions import ServiceError

logger = logging.getLogger(__name__)


class SendResult(BaseModel):
    sent: bool
    message_id: Optional[str] = None
    recipient: str


class Mailer:
    """Sends plain-text email with the configured SMTP account."""

    def __init__(self, settings: Optional[SMTPConfig] = None):
        self.settings = settings or config.smtp

    def can_send(self) -> bool:
        return self.settings.configured

    def _build(self, recipient: str, subject: str, body: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.settings.sender or self.settings.user
        message["To"] = recipient
        message["Subject"] = subject
        message["Message-ID"] = make_msgid()
        message.set_content(body)
        return message

    def _send_sync(self, message: EmailMessage) -> None:
        smtp_class = smtplib.SMTP_SSL if self.settings.secure else smtplib.SMTP
        with smtp_class(self.settings.host, self.settings.port, timeout=30) as smtp:
            if not self.settings.secure:
                smtp.starttls()
            smtp.login(self.settings.user, self.settings.password)
            smtp.send_message(message)

    async def send(self, recipient: str, subject: str, body: str) -> SendResult:
        if not self.can_send():
            raise ServiceError("SMTP not configured")
        message = self._build(recipient, subject, body)
        try:
            await asyncio.to_thread(self._send_sync, message)
        except (smtplib.SMTPException, OSError) as e:
            raise ServiceError(f"Email sending failed: {e}") from e
        logger.info("Sent email to %s", recipient)
        return SendResult(sent=True, message_id=message["Message-ID"], recipient=recipient)
