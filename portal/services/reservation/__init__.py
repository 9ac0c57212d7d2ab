"""
Reservation workflow services.
"""

from portal.services.reservation.recipient_resolver import RecipientResolver
from portal.services.reservation.room_binding_service import RoomBindingService
from portal.services.reservation.reservation_approval_service import ReservationApprovalService
from portal.services.reservation.reservation_intake_service import ReservationIntakeService
from portal.services.reservation.room_change_service import RoomChangeService
from portal.services.reservation.event_link_service import EventLinkService

__all__ = [
    "RecipientResolver",
    "RoomBindingService",
    "ReservationApprovalService",
    "ReservationIntakeService",
    "RoomChangeService",
    "EventLinkService",
]
