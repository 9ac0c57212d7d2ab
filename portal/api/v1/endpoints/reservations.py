"""
Reservation endpoints: intake, reviewer decisions and event links.
"""

from fastapi import APIRouter, Depends, status

from portal.api import deps
from portal.api.v1.endpoints.common import unwrap_result
from portal.core.permissions import CallerContext
from portal.schemas.reservation import (
    ApprovalRequest,
    CancellationRequest,
    EventLinkRequest,
    RejectionRequest,
    ReservationRequest,
    ReservationResponse,
    RoomChangeRequest,
)
from portal.services.reservation import (
    ReservationApprovalService,
    ReservationIntakeService,
    RoomChangeService,
    EventLinkService,
)

router = APIRouter(prefix="/reservations", tags=["Reservations"])


@router.post("", response_model=ReservationResponse, status_code=status.HTTP_201_CREATED)
def submit_reservation(
    payload: ReservationRequest,
    caller: CallerContext = Depends(deps.get_caller_context),
    service: ReservationIntakeService = Depends(deps.get_intake_service),
):
    return unwrap_result(service.submit(caller, payload))


@router.post("/{reservation_id}/approve", response_model=ReservationResponse)
def approve_reservation(
    reservation_id: str,
    payload: ApprovalRequest,
    caller: CallerContext = Depends(deps.get_caller_context),
    service: ReservationApprovalService = Depends(deps.get_approval_service),
):
    return unwrap_result(
        service.approve(
            caller,
            reservation_id,
            comment=payload.comment,
            room_id=payload.room_id,
            location=payload.location,
        )
    )


@router.post("/{reservation_id}/reject", response_model=ReservationResponse)
def reject_reservation(
    reservation_id: str,
    payload: RejectionRequest,
    caller: CallerContext = Depends(deps.get_caller_context),
    service: ReservationApprovalService = Depends(deps.get_approval_service),
):
    return unwrap_result(service.reject(caller, reservation_id, payload.comment))


@router.post("/{reservation_id}/cancel", response_model=ReservationResponse)
def cancel_reservation(
    reservation_id: str,
    payload: CancellationRequest,
    caller: CallerContext = Depends(deps.get_caller_context),
    service: ReservationApprovalService = Depends(deps.get_approval_service),
):
    return unwrap_result(service.cancel(caller, reservation_id, payload.reason))


@router.post("/{reservation_id}/change-room", response_model=ReservationResponse)
def change_reservation_room(
    reservation_id: str,
    payload: RoomChangeRequest,
    caller: CallerContext = Depends(deps.get_caller_context),
    service: RoomChangeService = Depends(deps.get_room_change_service),
):
    return unwrap_result(
        service.change_room(caller, reservation_id, payload.room_id, reason=payload.reason)
    )


@router.post("/{reservation_id}/link-event", response_model=ReservationResponse)
def link_reservation_event(
    reservation_id: str,
    payload: EventLinkRequest,
    caller: CallerContext = Depends(deps.get_caller_context),
    service: EventLinkService = Depends(deps.get_event_link_service),
):
    return unwrap_result(service.link_event(caller, reservation_id, payload.event_id))


@router.post("/{reservation_id}/unlink-event", response_model=ReservationResponse)
def unlink_reservation_event(
    reservation_id: str,
    caller: CallerContext = Depends(deps.get_caller_context),
    service: EventLinkService = Depends(deps.get_event_link_service),
):
    return unwrap_result(service.unlink_event(caller, reservation_id))
