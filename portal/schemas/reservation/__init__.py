"""
Reservation schemas package.
"""

from portal.schemas.reservation.reservation_request import ReservationRequest
from portal.schemas.reservation.reservation_response import ReservationResponse
from portal.schemas.reservation.reservation_decision import (
    ApprovalRequest,
    RejectionRequest,
    CancellationRequest,
    RoomChangeRequest,
    EventLinkRequest,
)

__all__ = [
    "ReservationRequest",
    "ReservationResponse",
    "ApprovalRequest",
    "RejectionRequest",
    "CancellationRequest",
    "RoomChangeRequest",
    "EventLinkRequest",
]
