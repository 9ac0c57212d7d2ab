"""
Request bodies for reviewer decisions.
"""

from typing import Optional

from pydantic import Field

from portal.schemas.common.base import BaseCreateSchema

__all__ = [
    "ApprovalRequest",
    "RejectionRequest",
    "CancellationRequest",
    "RoomChangeRequest",
    "EventLinkRequest",
]


class ApprovalRequest(BaseCreateSchema):
    """Approve a pending reservation, optionally binding a room or setting the event location."""

    comment: Optional[str] = Field(None, max_length=1000)
    room_id: Optional[int] = Field(None, description="Room to bind to the reservation")
    location: Optional[str] = Field(None, max_length=255, description="Event location shown on the calendar")


class RejectionRequest(BaseCreateSchema):
    """Reject a pending reservation. The comment is mandatory."""

    comment: str = Field(..., min_length=1, max_length=1000)


class CancellationRequest(BaseCreateSchema):
    """Cancel a pending or approved reservation."""

    reason: Optional[str] = Field(None, max_length=1000)


class RoomChangeRequest(BaseCreateSchema):
    """Move an approved reservation to another room."""

    room_id: int
    reason: Optional[str] = Field(None, max_length=1000)


class EventLinkRequest(BaseCreateSchema):
    """Attach an existing event to a reservation."""

    event_id: str = Field(..., min_length=1, max_length=36)
