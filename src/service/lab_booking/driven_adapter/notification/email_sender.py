"""Outbound e-mail transports."""

from collections import deque
from datetime import datetime, timezone
from email.message import EmailMessage
import smtplib
from typing import Deque

import anyio

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger
from src.service.lab_booking.app.interface.i_email_sender import IEmailSender


# newest unsent messages kept in memory
OUTBOX_LIMIT = 100


class LoggingEmailSender(IEmailSender):
    """
    Used when no SMTP server is configured: the message is logged and kept in
    ``sent_emails`` instead of being delivered. Only the newest ``max_kept``
    messages are kept.
    """

    def __init__(self, *, max_kept: int = OUTBOX_LIMIT) -> None:
        self.sent_emails: Deque[dict] = deque(maxlen=max_kept)

    @Logger.io
    async def send_email(self, *, to: str, subject: str, html: str, text: str) -> None:
        self.sent_emails.append(
            {
                'to': to,
                'subject': subject,
                'html': html,
                'text': text,
                'sent_at': datetime.now(timezone.utc),
            }
        )
        Logger.base.info(f'📧 [MAIL] SMTP not configured, not delivered: "{subject}" -> {to}')


class SmtpEmailSender(IEmailSender):
    def __init__(
        self,
        *,
        host: str,
        port: int,
        username: str,
        password: str,
        use_tls: bool,
        sender: str,
        timeout: float = 30.0,
    ) -> None:
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.sender = sender
        self.timeout = timeout

    def _build_message(self, *, to: str, subject: str, html: str, text: str) -> EmailMessage:
        message = EmailMessage()
        message['From'] = self.sender
        message['To'] = to
        message['Subject'] = subject
        message.set_content(text)
        message.add_alternative(html, subtype='html')
        return message

    def _deliver(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            if self.use_tls:
                smtp.starttls()
            if self.username:
                smtp.login(self.username, self.password)
            smtp.send_message(message)

    @Logger.io
    async def send_email(self, *, to: str, subject: str, html: str, text: str) -> None:
        message = self._build_message(to=to, subject=subject, html=html, text=text)
        # smtplib blocks, keep it off the event loop
        await anyio.to_thread.run_sync(self._deliver, message)
        Logger.base.info(f'📧 [MAIL] Sent "{subject}" -> {to}')


def build_email_sender() -> IEmailSender:
    if not settings.SMTP_HOST:
        Logger.base.warning('⚠️ [MAIL] SMTP_HOST not set, e-mails will only be logged')
        return LoggingEmailSender()
    return SmtpEmailSender(
        host=settings.SMTP_HOST,
        port=settings.SMTP_PORT,
        username=settings.SMTP_USERNAME,
        password=settings.SMTP_PASSWORD.get_secret_value(),
        use_tls=settings.SMTP_USE_TLS,
        sender=settings.EMAIL_FROM,
    )
