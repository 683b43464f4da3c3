"""
Outgoing mail abstraction: SMTP relay for production and an in-memory outbox for tests.
"""

from __future__ import annotations

import logging
import smtplib
import ssl
from dataclasses import dataclass, field
from email.message import EmailMessage
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class MailerError(RuntimeError):
    """Raised when an email could not be handed to the relay."""


@dataclass(frozen=True)
class OutgoingEmail:
    sender: str
    to: str
    subject: str
    html: str
    reply_to: Optional[str] = None

    def to_message(self) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = self.to
        message["Subject"] = self.subject
        if self.reply_to:
            message["Reply-To"] = self.reply_to
        message.set_content(
            "This message contains HTML content. Please view it in an HTML-capable client."
        )
        message.add_alternative(self.html, subtype="html")
        return message


class Mailer(Protocol):
    """Defines the operations the API needs from a mail relay."""

    def send(self, email: OutgoingEmail) -> None:
        ...

    def verify(self) -> bool:
        ...


@dataclass
class InMemoryMailer:
    """Test double collecting sent emails in ``outbox``."""

    outbox: list[OutgoingEmail] = field(default_factory=list)
    fail_with: Optional[str] = None

    def send(self, email: OutgoingEmail) -> None:
        if self.fail_with:
            raise MailerError(self.fail_with)
        self.outbox.append(email)

    def verify(self) -> bool:
        if self.fail_with:
            raise MailerError(self.fail_with)
        return True

    def reset(self) -> None:
        self.outbox.clear()
        self.fail_with = None


@dataclass
class SmtpMailer:
    """
    Sends mail through an authenticated SMTP relay (Gmail by default).

    Uses implicit TLS when ``use_ssl`` is set, otherwise upgrades a plain
    connection with STARTTLS.
    """

    host: str
    port: int
    username: Optional[str]
    password: Optional[str]
    use_ssl: bool = True
    timeout: float = 15

    def _connect(self) -> smtplib.SMTP:
        context = ssl.create_default_context()
        if self.use_ssl:
            return smtplib.SMTP_SSL(
                self.host, self.port, timeout=self.timeout, context=context
            )
        client = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
        client.starttls(context=context)
        return client

    def _require_credentials(self) -> None:
        if not self.username or not self.password:
            raise MailerError("EMAIL_USER and EMAIL_PASS must be configured")

    def send(self, email: OutgoingEmail) -> None:
        self._require_credentials()
        if not email.to:
            raise MailerError("EMAIL_TO must be configured")
        try:
            # Header values containing CR/LF raise ValueError here.
            message = email.to_message()
        except ValueError as exc:
            raise MailerError(f"Invalid email headers: {exc}") from exc
        try:
            with self._connect() as client:
                client.login(self.username, self.password)
                client.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            raise MailerError(f"SMTP delivery failed: {exc}") from exc

    def verify(self) -> bool:
        """Open a connection and log in; raises MailerError on failure."""
        self._require_credentials()
        try:
            with self._connect() as client:
                client.login(self.username, self.password)
        except (smtplib.SMTPException, OSError) as exc:
            raise MailerError(f"SMTP verification failed: {exc}") from exc
        return True
