"""
Room endpoints.
"""

from fastapi import APIRouter, Depends, Query

from portal.api import deps
from portal.api.v1.endpoints.common import unwrap_result
from portal.schemas.room import CapacityCheck
from portal.services.reservation import RoomBindingService

router = APIRouter(prefix="/rooms", tags=["Rooms"])


@router.get("/{room_id}/capacity-check", response_model=CapacityCheck)
def check_room_capacity(
    room_id: int,
    attendees: int = Query(..., gt=0),
    service: RoomBindingService = Depends(deps.get_room_binding_service),
):
    return unwrap_result(service.check_capacity(room_id, attendees))
