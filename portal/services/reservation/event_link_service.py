"""
Link an existing calendar event to a reservation, or undo that link.

The link is held on both rows (``events.reservation_id`` and
``reservations.event_id``). Both operations write the event side first
and the reservation side second. If the reservation write fails the
event side is put back to what it was.
"""

from typing import Optional

from portal.core.exceptions import (
    DependentWriteFailedError,
    EntityNotFoundError,
    EventLinkConflictError,
    InvalidTransitionError,
    ValidationError,
)
from portal.core.logging import log_execution_time
from portal.core.permissions import Authorizer, CallerContext, RoleBasedAuthorizer, require_reviewer
from portal.models.base.enums import EntityKind, ReservationStatus
from portal.models.reservation import Reservation
from portal.repositories.record_store import RecordStore
from portal.services.base import BaseService, ServiceResult


class EventLinkService(BaseService):
    """
    Reviewer-only maintenance of the event <-> reservation link.

    Only approved reservations carry an event. An event already linked to a
    different reservation is refused with CONFLICT, as is a reservation
    already linked to a different event.
    """

    def __init__(self, store: RecordStore, authorizer: Optional[Authorizer] = None):
        super().__init__(store)
        self.authorizer = authorizer or RoleBasedAuthorizer()

    # -------------------------------------------------------------------------
    # Link
    # -------------------------------------------------------------------------

    @log_execution_time()
    def link_event(
        self,
        caller: CallerContext,
        reservation_id: str,
        event_id: str,
    ) -> ServiceResult[Reservation]:
        """
        Link ``event_id`` to an approved reservation.

        Returns:
            ServiceResult with the linked reservation. Fails with NOT_FOUND,
            INSUFFICIENT_PERMISSIONS, INVALID_TRANSITION, CONFLICT or
            DEPENDENT_WRITE_FAILED (event side restored unless reported
            otherwise).
        """
        try:
            reservation = self.store.read(EntityKind.RESERVATION, reservation_id)
            require_reviewer(self.authorizer, caller, reservation.organization_id)

            if reservation.status != ReservationStatus.APPROVED.value:
                raise InvalidTransitionError(
                    reservation_id,
                    reservation.status,
                    ReservationStatus.APPROVED.value,
                    message="Only approved reservations can be linked to an event",
                )

            event = self.store.read(EntityKind.EVENT, event_id)
            if event.reservation_id not in (None, reservation_id):
                raise EventLinkConflictError(reservation_id, event_id, event.reservation_id)
            if reservation.event_id not in (None, event_id):
                raise EventLinkConflictError(
                    reservation_id,
                    event_id,
                    reservation.event_id,
                    message=f"Reservation {reservation_id} is already linked to event {reservation.event_id}",
                )

            previous = event.reservation_id
            self.store.update(EntityKind.EVENT, event_id, {"reservation_id": reservation_id})
            reservation = self._write_reservation_side(reservation_id, event_id, event_id, previous)

            self._log_operation("link event", reservation_id, {"event_id": event_id})
            return ServiceResult.success(reservation, message="Event linked to reservation")

        except Exception as e:
            return self._handle_exception(e, "link event", reservation_id, {"event_id": event_id})

    # -------------------------------------------------------------------------
    # Unlink
    # -------------------------------------------------------------------------

    @log_execution_time()
    def unlink_event(self, caller: CallerContext, reservation_id: str) -> ServiceResult[Reservation]:
        """Clear the event link on both sides; the event record is kept."""
        try:
            reservation = self.store.read(EntityKind.RESERVATION, reservation_id)
            require_reviewer(self.authorizer, caller, reservation.organization_id)

            event_id = reservation.event_id
            if event_id is None:
                raise ValidationError(
                    "Reservation is not linked to an event",
                    field_errors={"event_id": ["no linked event"]},
                )

            try:
                event = self.store.read(EntityKind.EVENT, event_id)
            except EntityNotFoundError:
                event = None

            if event is not None and event.reservation_id == reservation_id:
                self.store.update(EntityKind.EVENT, event_id, {"reservation_id": None})
                reservation = self._write_reservation_side(reservation_id, None, event_id, reservation_id)
            else:
                # Event side already points elsewhere or is gone
                reservation = self.store.update(EntityKind.RESERVATION, reservation_id, {"event_id": None})

            self._log_operation("unlink event", reservation_id, {"event_id": event_id})
            return ServiceResult.success(reservation, message="Event unlinked from reservation")

        except Exception as e:
            return self._handle_exception(e, "unlink event", reservation_id)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _write_reservation_side(
        self,
        reservation_id: str,
        value: Optional[str],
        event_id: str,
        event_previous: Optional[str],
    ) -> Reservation:
        try:
            return self.store.update(EntityKind.RESERVATION, reservation_id, {"event_id": value})
        except Exception as e:
            compensated = self._restore_event_side(event_id, event_previous, reservation_id)
            raise DependentWriteFailedError(
                reservation_id,
                e,
                compensated=compensated,
                message=f"Failed to update event link on reservation {reservation_id}: {e}",
            ) from e

    def _restore_event_side(
        self,
        event_id: str,
        previous: Optional[str],
        reservation_id: str,
    ) -> bool:
        try:
            self.store.update(EntityKind.EVENT, event_id, {"reservation_id": previous})
        except Exception as e:
            self._logger.critical(
                f"Compensation failed, event and reservation disagree on their link: {e}",
                extra={
                    "reservation_id": reservation_id,
                    "event_id": event_id,
                    "exception_type": type(e).__name__,
                },
            )
            return False

        self._logger.warning(
            "Event link restored after reservation write failed",
            extra={"reservation_id": reservation_id, "event_id": event_id},
        )
        return True


__all__ = ["EventLinkService"]
