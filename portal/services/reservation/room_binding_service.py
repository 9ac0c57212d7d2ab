"""
Room binding for approved reservations.

Binding a room sets the room's occupying-reservation back-reference and
copies the room's attributes onto the derived event. Callers decide
whether a failure here is fatal.
"""

from datetime import date, time
from typing import List, Optional

from portal.core.exceptions import InsufficientCapacityError
from portal.models.base.enums import EntityKind, ReservationStatus
from portal.schemas.room import CapacityCheck, RoomAttributes
from portal.services.base import BaseService, ServiceResult


class RoomBindingService(BaseService):
    """Reads room attributes and writes room/event bindings."""

    # -------------------------------------------------------------------------
    # Binding
    # -------------------------------------------------------------------------

    def get_attributes(self, room_id: int) -> RoomAttributes:
        room = self.store.read(EntityKind.ROOM, room_id)
        return RoomAttributes.model_validate(room)

    def bind(self, room_id: int, reservation_id: str) -> RoomAttributes:
        """
        Point the room at ``reservation_id`` and return its attributes.

        Raises:
            EntityNotFoundError: If the room does not exist
            RepositoryError: If the write fails
        """
        room = self.store.update(EntityKind.ROOM, room_id, {"reservation_id": reservation_id})
        self._log_operation("bind room", room_id, {"reservation_id": reservation_id})
        return RoomAttributes.model_validate(room)

    def apply_to_event(self, event_id: str, room_id: int, attributes: RoomAttributes) -> None:
        """Overwrite the event's room and location fields in a single write."""
        fields = attributes.event_fields()
        fields["room_id"] = room_id
        self.store.update(EntityKind.EVENT, event_id, fields)
        self._log_operation("apply room to event", event_id, {"room_id": room_id})

    def release(self, reservation_id: str, keep_room_id: Optional[int] = None) -> List[int]:
        """
        Clear the back-reference on every room occupied by ``reservation_id``.

        Returns the ids of the released rooms.
        """
        released = []
        for room in self.store.find(EntityKind.ROOM, reservation_id=reservation_id):
            if keep_room_id is not None and room.id == keep_room_id:
                continue
            self.store.update(EntityKind.ROOM, room.id, {"reservation_id": None})
            released.append(room.id)

        if released:
            self._log_operation("release rooms", reservation_id, {"room_ids": released})
        return released

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    @staticmethod
    def evaluate_capacity(attributes: RoomAttributes, attendees: int) -> CapacityCheck:
        if attributes.capacity < attendees:
            return CapacityCheck(
                valid=False,
                capacity=attributes.capacity,
                required=attendees,
                message=(
                    f"Room capacity is insufficient. "
                    f"Capacity: {attributes.capacity}, required: {attendees}"
                ),
            )
        return CapacityCheck(valid=True, capacity=attributes.capacity, required=attendees)

    def check_capacity(self, room_id: int, attendees: int) -> ServiceResult[CapacityCheck]:
        """Compare a room's capacity with an attendee count."""
        try:
            return ServiceResult.success(self.evaluate_capacity(self.get_attributes(room_id), attendees))
        except Exception as e:
            return self._handle_exception(e, "check room capacity", room_id)

    def ensure_capacity(self, attributes: RoomAttributes, attendees: int) -> None:
        check = self.evaluate_capacity(attributes, attendees)
        if not check.valid:
            raise InsufficientCapacityError(
                check.message,
                requested=attendees,
                available=attributes.capacity,
            )

    def find_conflicts(
        self,
        room_id: int,
        reservation_date: date,
        start_time: time,
        end_time: time,
        exclude_reservation_id: Optional[str] = None,
    ) -> List[str]:
        """Ids of approved reservations in ``room_id`` overlapping the given window."""
        candidates = self.store.find(
            EntityKind.RESERVATION,
            room_id=room_id,
            reservation_date=reservation_date,
            status=ReservationStatus.APPROVED.value,
        )
        return [
            other.id
            for other in candidates
            if other.id != exclude_reservation_id
            and start_time < other.end_time
            and other.start_time < end_time
        ]


__all__ = ["RoomBindingService"]
