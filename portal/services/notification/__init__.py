"""
Notification services.
"""

from portal.services.notification.channels import (
    NotificationChannel,
    InAppNotificationChannel,
    EmailNotificationChannel,
    EmailConfig,
    build_channel,
)
from portal.services.notification.notification_dispatcher import NotificationDispatcher
from portal.services.notification.templates import NotificationTemplate, render_status_template

__all__ = [
    "NotificationChannel",
    "InAppNotificationChannel",
    "EmailNotificationChannel",
    "EmailConfig",
    "build_channel",
    "NotificationDispatcher",
    "NotificationTemplate",
    "render_status_template",
]
