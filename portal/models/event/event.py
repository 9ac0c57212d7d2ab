# portal/models/event/event.py
"""
Calendar event derived from an approved reservation.
"""

from datetime import date, time
from typing import Optional

from sqlalchemy import Date, ForeignKey, Integer, String, Text, Time
from sqlalchemy.orm import Mapped, mapped_column

from portal.models.base.base_model import TimestampModel
from portal.models.base.enums import EventApprovalStatus

__all__ = ["Event"]


class Event(TimestampModel):
    """
    Calendar entry representing the approved usage of a space.

    The ``room_*`` columns and ``location`` are always written together when
    a room is bound so the event never mixes data from two rooms.
    """

    __tablename__ = "events"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    event_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    capacity: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    organization_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)

    # Room derived location
    room_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("rooms.id", ondelete="SET NULL"),
        nullable=True,
    )
    room_label: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    room_building: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    room_floor: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    room_capacity: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    approval_status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=EventApprovalStatus.APPROVED.value,
    )
    approval_comment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    reviewer_identity: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Null while the event is unlinked
    reservation_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("reservations.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
