"""
Move an approved reservation to another room.
"""

from datetime import datetime, timezone
from typing import Optional

from portal.core.exceptions import InvalidTransitionError, RoomConflictError
from portal.core.logging import log_execution_time
from portal.core.permissions import Authorizer, CallerContext, RoleBasedAuthorizer, require_reviewer
from portal.models.base.enums import EntityKind, ReservationStatus
from portal.models.reservation import Reservation
from portal.repositories.record_store import RecordStore
from portal.services.base import BaseService, ServiceResult
from portal.services.reservation.room_binding_service import RoomBindingService


class RoomChangeService(BaseService):
    """
    Rebinds an approved reservation to a different room.

    The new room must hold the attendee count and must not already host an
    overlapping approved reservation. Releasing the previous room and
    relocating the event are best-effort.
    """

    def __init__(
        self,
        store: RecordStore,
        room_binding: Optional[RoomBindingService] = None,
        authorizer: Optional[Authorizer] = None,
    ):
        super().__init__(store)
        self.room_binding = room_binding or RoomBindingService(store)
        self.authorizer = authorizer or RoleBasedAuthorizer()

    @log_execution_time()
    def change_room(
        self,
        caller: CallerContext,
        reservation_id: str,
        new_room_id: int,
        reason: Optional[str] = None,
    ) -> ServiceResult[Reservation]:
        try:
            reservation = self.store.read(EntityKind.RESERVATION, reservation_id)
            require_reviewer(self.authorizer, caller, reservation.organization_id)

            if reservation.status != ReservationStatus.APPROVED.value:
                raise InvalidTransitionError(
                    reservation_id,
                    reservation.status,
                    ReservationStatus.APPROVED.value,
                    message="Only approved reservations can change rooms",
                )

            attributes = self.room_binding.get_attributes(new_room_id)
            self.room_binding.ensure_capacity(attributes, reservation.attendee_count)

            conflicts = self.room_binding.find_conflicts(
                new_room_id,
                reservation.reservation_date,
                reservation.start_time,
                reservation.end_time,
                exclude_reservation_id=reservation_id,
            )
            if conflicts:
                raise RoomConflictError(new_room_id, conflicts)

            try:
                self.room_binding.release(reservation_id, keep_room_id=new_room_id)
            except Exception as e:
                self._logger.warning(
                    f"Could not release previous room: {e}",
                    extra={"reservation_id": reservation_id, "previous_room_id": reservation.room_id},
                )

            self.room_binding.bind(new_room_id, reservation_id)

            reservation = self.store.update(
                EntityKind.RESERVATION,
                reservation_id,
                {
                    "room_id": new_room_id,
                    "observations": self._append_observation(reservation.observations, reason),
                },
            )

            if reservation.event_id:
                try:
                    self.room_binding.apply_to_event(reservation.event_id, new_room_id, attributes)
                except Exception as e:
                    self._logger.warning(
                        f"Event was not relocated, reservation room changed anyway: {e}",
                        extra={"reservation_id": reservation_id, "event_id": reservation.event_id},
                    )

            self._log_operation(
                "change reservation room",
                reservation_id,
                {"room_id": new_room_id, "changed_by": caller.identity},
            )
            return ServiceResult.success(reservation, message="Reservation room changed")

        except Exception as e:
            return self._handle_exception(e, "change reservation room", reservation_id)

    @staticmethod
    def _append_observation(observations: Optional[str], reason: Optional[str]) -> Optional[str]:
        reason = (reason or "").strip()
        if not reason:
            return observations
        stamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
        return f"{observations or ''}\n\n[ROOM CHANGED] {stamp}: {reason}".strip()


__all__ = ["RoomChangeService"]
