"""
Notification delivery channels.

A channel makes at most one delivery attempt and raises
``NotificationFailedError`` when it cannot deliver.
"""

import re
import smtplib
from abc import ABC, abstractmethod
from dataclasses import dataclass
from email.mime.text import MIMEText
from typing import Optional

from portal.config.settings import Settings, settings as default_settings
from portal.core.exceptions import NotificationFailedError
from portal.core.logging import get_logger
from portal.models.base.enums import EntityKind, NotificationChannelType
from portal.repositories.record_store import RecordStore
from portal.services.notification.templates import NotificationTemplate

logger = get_logger(__name__)

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def is_valid_email(value: str) -> bool:
    return bool(value and _EMAIL_PATTERN.match(value))


class NotificationChannel(ABC):
    """Delivers a rendered message to one recipient."""

    channel_type: NotificationChannelType

    @abstractmethod
    def deliver(
        self,
        recipient: str,
        template: NotificationTemplate,
        reservation_id: Optional[str] = None,
    ) -> None:
        ...


class InAppNotificationChannel(NotificationChannel):
    """Stores the message as a Notification record shown in the portal."""

    channel_type = NotificationChannelType.IN_APP

    def __init__(self, store: RecordStore):
        self.store = store

    def deliver(self, recipient, template, reservation_id=None):
        try:
            self.store.create(
                EntityKind.NOTIFICATION,
                {
                    "recipient": recipient,
                    "title": template.title,
                    "message": template.message,
                    "level": template.level.value,
                    "reservation_id": reservation_id,
                    "read": False,
                },
            )
        except Exception as e:
            raise NotificationFailedError(
                f"Failed to store notification: {e}",
                recipient=recipient,
                channel=self.channel_type.value,
            ) from e


@dataclass
class EmailConfig:
    """SMTP configuration."""
    smtp_host: str
    smtp_port: int
    username: Optional[str] = None
    password: Optional[str] = None
    use_tls: bool = True
    from_email: Optional[str] = None
    timeout: float = 5.0

    @classmethod
    def from_settings(cls, config: Settings) -> "EmailConfig":
        return cls(
            smtp_host=config.SMTP_HOST,
            smtp_port=config.SMTP_PORT,
            username=config.SMTP_USER,
            password=config.SMTP_PASSWORD,
            use_tls=config.SMTP_TLS,
            from_email=config.EMAIL_FROM_ADDRESS,
            timeout=config.NOTIFICATION_TIMEOUT_SECONDS,
        )


class EmailNotificationChannel(NotificationChannel):
    """Sends the message by SMTP. Every socket operation is bounded by ``timeout``."""

    channel_type = NotificationChannelType.EMAIL

    def __init__(self, config: EmailConfig):
        self.config = config

    def deliver(self, recipient, template, reservation_id=None):
        if not is_valid_email(recipient):
            raise NotificationFailedError(
                f"Recipient is not an email address: {recipient}",
                recipient=recipient,
                channel=self.channel_type.value,
            )

        msg = MIMEText(template.message, "plain")
        msg["Subject"] = template.title
        msg["From"] = self.config.from_email or self.config.username or "noreply@localhost"
        msg["To"] = recipient
        if reservation_id:
            msg["X-Reservation-Id"] = reservation_id

        try:
            with smtplib.SMTP(
                self.config.smtp_host,
                self.config.smtp_port,
                timeout=self.config.timeout,
            ) as server:
                if self.config.use_tls:
                    server.starttls()
                if self.config.username and self.config.password:
                    server.login(self.config.username, self.config.password)
                server.send_message(msg, to_addrs=[recipient])
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationFailedError(
                f"Failed to send email: {e}",
                recipient=recipient,
                channel=self.channel_type.value,
            ) from e

        logger.info("Email notification sent", extra={"recipient": recipient})


def build_channel(store: RecordStore, config: Optional[Settings] = None) -> NotificationChannel:
    """Build the channel selected by ``NOTIFICATION_CHANNEL``."""
    config = config or default_settings
    if config.NOTIFICATION_CHANNEL == NotificationChannelType.EMAIL.value:
        return EmailNotificationChannel(EmailConfig.from_settings(config))
    return InAppNotificationChannel(store)


__all__ = [
    "NotificationChannel",
    "InAppNotificationChannel",
    "EmailNotificationChannel",
    "EmailConfig",
    "build_channel",
    "is_valid_email",
]
