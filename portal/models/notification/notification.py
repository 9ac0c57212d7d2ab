# portal/models/notification/notification.py
"""
In-app notification record.
"""

from typing import Optional

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from portal.models.base.base_model import TimestampModel
from portal.models.base.enums import NotificationLevel

__all__ = ["Notification"]


class Notification(TimestampModel):
    """Message shown to a recipient inside the portal."""

    __tablename__ = "notifications"

    recipient: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    level: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=NotificationLevel.INFO.value,
    )
    reservation_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)
    read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    archived: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
