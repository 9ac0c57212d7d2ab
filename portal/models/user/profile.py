# portal/models/user/profile.py
"""
Requester profile, read when resolving notification recipients.
"""

from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from portal.models.base.base_model import TimestampModel

__all__ = ["Profile"]


class Profile(TimestampModel):
    """Student or organization member profile."""

    __tablename__ = "profiles"

    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, unique=True, index=True)
    display_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
