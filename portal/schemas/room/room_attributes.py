"""
Room attribute schemas used when binding rooms to reservations.
"""

from typing import Any, Dict, Optional

from portal.schemas.common.base import BaseSchema

__all__ = ["RoomAttributes", "CapacityCheck"]


class RoomAttributes(BaseSchema):
    """Descriptive attributes copied from a room onto an event."""

    id: int
    label: str
    building: str
    floor: str
    capacity: int

    @property
    def location_label(self) -> str:
        return f"{self.label} - {self.building} ({self.floor})"

    def event_fields(self) -> Dict[str, Any]:
        """All event columns derived from the room, written as one unit."""
        return {
            "room_id": self.id,
            "room_label": self.label,
            "room_building": self.building,
            "room_floor": self.floor,
            "room_capacity": self.capacity,
            "location": self.location_label,
        }


class CapacityCheck(BaseSchema):
    """Outcome of comparing a room's capacity with an attendee count."""

    valid: bool
    capacity: int
    required: int
    message: Optional[str] = None
