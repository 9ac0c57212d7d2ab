"""
Response schemas for reservations.
"""

from datetime import date as Date, datetime, time as Time
from typing import Any, Dict, Optional

from pydantic import Field

from portal.schemas.common.base import BaseResponseSchema

__all__ = ["ReservationResponse"]


class ReservationResponse(BaseResponseSchema):
    """Reservation as returned by the review workflow."""

    id: str
    kind: str
    status: str
    reservation_date: Date
    start_time: Time
    end_time: Time
    attendee_count: int

    requester_name: Optional[str] = None
    requester_phone: Optional[str] = None
    profile_id: Optional[str] = None
    organization_id: Optional[int] = None

    motive: Optional[str] = None
    event_title: Optional[str] = None
    event_description: Optional[str] = None
    observations: Optional[str] = None
    details: Dict[str, Any] = Field(default_factory=dict)

    room_id: Optional[int] = None
    event_id: Optional[str] = None

    reviewer_identity: Optional[str] = None
    decision_comment: Optional[str] = None
    decided_at: Optional[datetime] = None

    cancellation_reason: Optional[str] = None
    cancelled_by: Optional[str] = None
    cancelled_at: Optional[datetime] = None

