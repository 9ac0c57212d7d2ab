"""
Reservation intake schema.

Every form variant (room form, auditorium form, their revisions) produces
the same validated ``ReservationRequest``; the approval workflow never
depends on which variant submitted it.
"""

from datetime import date as Date, time as Time
from typing import Any, Dict, Optional

from pydantic import Field, field_validator, model_validator

from portal.models.base.enums import ReservationKind
from portal.schemas.common.base import BaseCreateSchema

__all__ = ["ReservationRequest"]


class ReservationRequest(BaseCreateSchema):
    """
    Validated reservation submitted by an organization.

    ``details`` carries the kind-specific speaker, equipment and catering
    answers. They are stored as-is and never interpreted by the review flow.
    """

    kind: ReservationKind = Field(..., description="Room or auditorium")
    reservation_date: Date = Field(..., description="Requested day")
    start_time: Time = Field(..., description="Start of the requested slot")
    end_time: Time = Field(..., description="End of the requested slot")
    attendee_count: int = Field(..., gt=0, description="Expected number of attendees")

    requester_name: str = Field(..., min_length=1, max_length=255)
    requester_phone: str = Field(..., min_length=1, max_length=50)
    profile_id: Optional[str] = Field(None, description="Requester profile, used for notifications")
    organization_id: int = Field(..., description="Organization submitting the request")

    motive: Optional[str] = Field(None, max_length=100)
    event_title: Optional[str] = Field(None, max_length=255)
    event_description: Optional[str] = None
    observations: Optional[str] = None
    room_id: Optional[int] = Field(None, description="Room pre-selected by the requester")
    details: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("reservation_date")
    @classmethod
    def validate_not_in_past(cls, v: Date) -> Date:
        if v < Date.today():
            raise ValueError("Reservation date cannot be in the past")
        return v

    @model_validator(mode="after")
    def validate_time_window(self) -> "ReservationRequest":
        if self.end_time <= self.start_time:
            raise ValueError("End time must be after start time")
        return self
