# portal/models/reservation/reservation.py
"""
Reservation model.

A request for room or auditorium usage submitted by a student organization
and driven through review by the approval workflow.
"""

from datetime import date, datetime, time
from typing import Any, Dict, Optional

from sqlalchemy import (
    JSON,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Time,
)
from sqlalchemy.orm import Mapped, mapped_column

from portal.models.base.base_model import TimestampModel
from portal.models.base.enums import ReservationStatus

__all__ = ["Reservation"]


class Reservation(TimestampModel):
    """
    Reservation of a room or auditorium.

    Approval metadata (reviewer_identity, decision_comment, decided_at) is
    only populated while the status is approved or rejected. ``event_id``
    points at the derived calendar event once it has been created.
    """

    __tablename__ = "reservations"

    # Requested slot
    reservation_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    attendee_count: Mapped[int] = mapped_column(Integer, nullable=False)

    # Requester
    requester_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    requester_phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    profile_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("profiles.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    organization_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)

    # What is being reserved and why
    kind: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    motive: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    event_title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    event_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    details: Mapped[Dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        comment="Speaker, equipment and catering fields copied through from the intake form",
    )
    observations: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Bindings set during review
    room_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("rooms.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    event_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)

    # Review state
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ReservationStatus.PENDING.value,
        index=True,
    )
    reviewer_identity: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    decision_comment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    decided_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # Cancellation
    cancellation_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    cancelled_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    cancelled_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("ix_reservations_room_date_status", "room_id", "reservation_date", "status"),
    )

    @property
    def has_approval_metadata(self) -> bool:
        return any(
            value is not None
            for value in (self.reviewer_identity, self.decision_comment, self.decided_at)
        )
