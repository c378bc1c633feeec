"""Alert email delivery over SMTP with fixed-interval retries."""
import asyncio
import logging
import smtplib
from email.message import EmailMessage
from typing import Protocol

from stock_alert_monitor.exceptions import SendError
from stock_alert_monitor.notifications.email_template import (
    prepare_email_body, prepare_subject, prepare_text_body)
from stock_alert_monitor.schemas import AlertNotification

logger = logging.getLogger(__name__)


class EmailTransport(Protocol):
    """Blocking delivery of one fully built message."""

    def send(self, message: EmailMessage) -> None:
        ...


class SmtpTransport:
    """Sends messages through an SMTP relay (implicit TLS or STARTTLS)."""

    def __init__(
        self,
        host: str,
        port: int,
        *,
        username: str | None = None,
        password: str | None = None,
        use_ssl: bool = True,
        timeout: float = 30.0,
    ) -> None:
        self._host = host
        self._port = port
        self._username = username
        self._password = password
        self._use_ssl = use_ssl
        self._timeout = timeout

    def _connect(self) -> smtplib.SMTP:
        if self._use_ssl:
            return smtplib.SMTP_SSL(self._host, self._port, timeout=self._timeout)
        server = smtplib.SMTP(self._host, self._port, timeout=self._timeout)
        server.starttls()
        return server

    def send(self, message: EmailMessage) -> None:
        with self._connect() as server:
            if self._username and self._password:
                server.login(self._username, self._password)
            server.send_message(message)


class EmailNotifier:
    """Renders alert emails and delivers them with bounded, linear retries.

    No jitter and no backoff: one send per triggered alert is a low-volume
    path, so ``max_attempts`` tries spaced ``retry_delay`` seconds apart.
    """

    def __init__(
        self,
        transport: EmailTransport,
        sender: str,
        *,
        max_attempts: int = 3,
        retry_delay: float = 1.0,
    ) -> None:
        self._transport = transport
        self._sender = sender
        self._max_attempts = max(1, max_attempts)
        self._retry_delay = retry_delay

    def build_message(self, notification: AlertNotification) -> EmailMessage:
        """Build the multipart (text + HTML) alert email."""
        message = EmailMessage()
        message["Subject"] = prepare_subject(notification)
        message["From"] = self._sender
        message["To"] = notification.recipient
        message.set_content(prepare_text_body(notification))
        message.add_alternative(prepare_email_body(notification), subtype="html")
        return message

    async def send_alert(self, notification: AlertNotification) -> int:
        """Send the alert email.

        Returns:
            The number of attempts it took.

        Raises:
            SendError: the message could not be built, or every attempt
                failed; carries the attempt count and the last error.
        """
        try:
            message = self.build_message(notification)
        except Exception as e:  # pylint: disable=broad-except
            raise SendError(
                notification.recipient, 0, f"Failed to build email: {e}"
            ) from e

        last_error = ""
        for attempt in range(1, self._max_attempts + 1):
            try:
                await asyncio.to_thread(self._transport.send, message)
            except Exception as e:  # pylint: disable=broad-except
                last_error = str(e) or type(e).__name__
                logger.error(
                    "Email send failed (%d/%d) to %s: %s",
                    attempt, self._max_attempts, notification.recipient, last_error,
                )
                if attempt < self._max_attempts:
                    await asyncio.sleep(self._retry_delay)
                continue
            logger.info("Alert email sent to %s for %s", notification.recipient, notification.symbol)
            return attempt
        raise SendError(notification.recipient, self._max_attempts, last_error)
