"""
Reservation approval workflow.

Drives a reservation through approve / reject / cancel. The store offers
no multi-entity transaction, so every decision is an ordered sequence of
single-row writes:

    approve:  reservation (conditional) -> event -> reservation.event_id
              -> notification -> room binding
    reject:   reservation (conditional) -> notification
    cancel:   reservation (conditional)

Only the event write is critical after the reservation has changed; if it
fails the reservation is put back to pending. Everything after it is
best-effort and logged.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from portal.config.settings import Settings, settings as default_settings
from portal.core.exceptions import (
    DependentWriteFailedError,
    InvalidTransitionError,
    NonCriticalWriteFailedError,
    ValidationError,
)
from portal.core.logging import log_execution_time
from portal.core.permissions import Authorizer, CallerContext, RoleBasedAuthorizer, require_reviewer
from portal.models.base.enums import (
    EntityKind,
    EventApprovalStatus,
    ReservationKind,
    ReservationStatus,
)
from portal.models.reservation import Reservation
from portal.repositories.record_store import RecordStore
from portal.services.base import BaseService, ServiceResult
from portal.services.notification import NotificationDispatcher
from portal.services.reservation.recipient_resolver import RecipientResolver
from portal.services.reservation.room_binding_service import RoomBindingService

_PENDING = ReservationStatus.PENDING.value
_APPROVED = ReservationStatus.APPROVED.value
_REJECTED = ReservationStatus.REJECTED.value
_CANCELLED = ReservationStatus.CANCELLED.value

_CLEARED_APPROVAL = {
    "reviewer_identity": None,
    "decision_comment": None,
    "decided_at": None,
}


class ReservationApprovalService(BaseService):
    """
    Reviewer decisions on reservations.

    State machine::

        pending  --approve-->  approved
        pending  --reject--->  rejected
        pending  --cancel--->  cancelled
        approved --cancel--->  cancelled

    Any other request fails with INVALID_TRANSITION and writes nothing.
    """

    def __init__(
        self,
        store: RecordStore,
        dispatcher: NotificationDispatcher,
        resolver: Optional[RecipientResolver] = None,
        room_binding: Optional[RoomBindingService] = None,
        authorizer: Optional[Authorizer] = None,
        config: Optional[Settings] = None,
    ):
        super().__init__(store)
        self.dispatcher = dispatcher
        self.resolver = resolver or RecipientResolver(store)
        self.room_binding = room_binding or RoomBindingService(store)
        self.authorizer = authorizer or RoleBasedAuthorizer()
        self.config = config or default_settings

    # -------------------------------------------------------------------------
    # Approve
    # -------------------------------------------------------------------------

    @log_execution_time()
    def approve(
        self,
        caller: CallerContext,
        reservation_id: str,
        comment: Optional[str] = None,
        room_id: Optional[int] = None,
        location: Optional[str] = None,
    ) -> ServiceResult[Reservation]:
        """
        Approve a pending reservation and create its calendar event.

        Args:
            caller: Reviewer performing the approval
            reservation_id: Reservation to approve
            comment: Reviewer comment (defaults to a fixed approval message)
            room_id: Room to bind once the event exists
            location: Event location; blank falls back to the kind default.
                A bound room's label replaces it.

        Returns:
            ServiceResult with the approved reservation. Fails with
            NOT_FOUND, INSUFFICIENT_PERMISSIONS, INVALID_TRANSITION or
            DEPENDENT_WRITE_FAILED.
        """
        try:
            reservation = self.store.read(EntityKind.RESERVATION, reservation_id)
            require_reviewer(self.authorizer, caller, reservation.organization_id)
            self._ensure_status(reservation, (_PENDING,), _APPROVED)

            comment = (comment or "").strip() or self.config.DEFAULT_APPROVAL_COMMENT
            self._transition(
                reservation_id,
                {
                    "status": _APPROVED,
                    "decision_comment": comment,
                    "decided_at": datetime.now(timezone.utc),
                    "reviewer_identity": caller.identity,
                },
                from_statuses=(_PENDING,),
                requested=_APPROVED,
            )

            # From here until the event exists, any failure reverts the approval.
            try:
                reservation = self.store.read(EntityKind.RESERVATION, reservation_id)
                event = self.store.create(
                    EntityKind.EVENT,
                    self._build_event_fields(reservation, location=location),
                )
            except Exception as e:
                compensated = self._revert_to_pending(reservation_id)
                raise DependentWriteFailedError(reservation_id, e, compensated=compensated) from e

            reservation = self._link_event(reservation, event.id)

            self._notify(reservation, ReservationStatus.APPROVED, comment)

            if room_id is not None:
                reservation = self._bind_room(reservation, event.id, room_id)

            self._log_operation(
                "approve reservation",
                reservation_id,
                {
                    "event_id": event.id,
                    "reviewer": caller.identity,
                    "room_id": room_id,
                    "location": event.location,
                },
            )
            return ServiceResult.success(reservation, message="Reservation approved")

        except Exception as e:
            return self._handle_exception(e, "approve reservation", reservation_id)

    # -------------------------------------------------------------------------
    # Reject
    # -------------------------------------------------------------------------

    @log_execution_time()
    def reject(
        self,
        caller: CallerContext,
        reservation_id: str,
        comment: str,
    ) -> ServiceResult[Reservation]:
        """Reject a pending reservation. A non-blank comment is required."""
        try:
            comment = (comment or "").strip()
            if not comment:
                raise ValidationError(
                    "A comment is required to reject a reservation",
                    field_errors={"comment": ["must not be blank"]},
                )

            reservation = self.store.read(EntityKind.RESERVATION, reservation_id)
            require_reviewer(self.authorizer, caller, reservation.organization_id)
            self._ensure_status(reservation, (_PENDING,), _REJECTED)

            reservation = self._transition(
                reservation_id,
                {
                    "status": _REJECTED,
                    "decision_comment": comment,
                    "decided_at": datetime.now(timezone.utc),
                    "reviewer_identity": caller.identity,
                },
                from_statuses=(_PENDING,),
                requested=_REJECTED,
            )

            self._notify(reservation, ReservationStatus.REJECTED, comment)

            self._log_operation("reject reservation", reservation_id, {"reviewer": caller.identity})
            return ServiceResult.success(reservation, message="Reservation rejected")

        except Exception as e:
            return self._handle_exception(e, "reject reservation", reservation_id)

    # -------------------------------------------------------------------------
    # Cancel
    # -------------------------------------------------------------------------

    @log_execution_time()
    def cancel(
        self,
        caller: CallerContext,
        reservation_id: str,
        reason: Optional[str] = None,
    ) -> ServiceResult[Reservation]:
        """
        Cancel a pending or approved reservation.

        The caller is entitled to cancel by the context that invoked this
        operation; no reviewer check is made. No notification is sent.
        Approval metadata and the event link are cleared; the event record
        itself is left in place.
        """
        try:
            reservation = self.store.read(EntityKind.RESERVATION, reservation_id)
            self._ensure_status(reservation, (_PENDING, _APPROVED), _CANCELLED)

            reason = (reason or "").strip() or self.config.DEFAULT_CANCELLATION_REASON
            fields = {
                "status": _CANCELLED,
                "cancellation_reason": reason,
                "cancelled_by": caller.identity,
                "cancelled_at": datetime.now(timezone.utc),
                "event_id": None,
                **_CLEARED_APPROVAL,
            }
            reservation = self._transition(
                reservation_id,
                fields,
                from_statuses=(_PENDING, _APPROVED),
                requested=_CANCELLED,
            )

            self._log_operation("cancel reservation", reservation_id, {"cancelled_by": caller.identity})
            return ServiceResult.success(reservation, message="Reservation cancelled")

        except Exception as e:
            return self._handle_exception(e, "cancel reservation", reservation_id)

    # -------------------------------------------------------------------------
    # Transition helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _ensure_status(reservation, allowed, requested: str) -> None:
        if reservation.status not in allowed:
            raise InvalidTransitionError(reservation.id, reservation.status, requested)

    def _transition(
        self,
        reservation_id: str,
        fields: Dict[str, Any],
        from_statuses,
        requested: str,
    ) -> Reservation:
        """Apply ``fields`` only if the stored status is still one of ``from_statuses``."""
        updated = self.store.update_where(
            EntityKind.RESERVATION,
            reservation_id,
            fields,
            {"status": list(from_statuses)},
        )
        if updated is None:
            current = self.store.read(EntityKind.RESERVATION, reservation_id)
            raise InvalidTransitionError(reservation_id, current.status, requested)
        return updated

    def _revert_to_pending(self, reservation_id: str) -> bool:
        """Undo an approval whose event could not be created."""
        try:
            reverted = self.store.update_where(
                EntityKind.RESERVATION,
                reservation_id,
                {"status": _PENDING, **_CLEARED_APPROVAL},
                {"status": _APPROVED},
            )
        except Exception as e:
            self._logger.critical(
                f"Compensation failed, reservation left approved without event: {e}",
                extra={"reservation_id": reservation_id, "exception_type": type(e).__name__},
            )
            return False

        if reverted is None:
            self._logger.critical(
                "Compensation matched no approved reservation",
                extra={"reservation_id": reservation_id},
            )
            return False

        self._logger.warning(
            "Approval reverted to pending after event creation failed",
            extra={"reservation_id": reservation_id},
        )
        return True

    # -------------------------------------------------------------------------
    # Best-effort steps
    # -------------------------------------------------------------------------

    def _link_event(self, reservation: Reservation, event_id: str) -> Reservation:
        try:
            return self.store.update(EntityKind.RESERVATION, reservation.id, {"event_id": event_id})
        except Exception as e:
            error = NonCriticalWriteFailedError(
                f"Could not store event link on reservation: {e}",
                entity=EntityKind.RESERVATION.value,
                entity_id=reservation.id,
            )
            self._logger.error(str(error), extra={**error.details, "event_id": event_id})
            return self._reload(reservation)

    def _notify(self, reservation: Reservation, status: ReservationStatus, comment: Optional[str]) -> bool:
        try:
            recipient = self.resolver.resolve(reservation)
            if recipient is None:
                self._logger.info(
                    "No notification recipient, dispatch skipped",
                    extra={"reservation_id": reservation.id},
                )
                return False
            return self.dispatcher.dispatch(
                recipient,
                reservation.kind,
                status,
                reservation.id,
                comment=comment,
            )
        except Exception as e:
            self._logger.warning(
                f"Notification step failed: {e}",
                extra={"reservation_id": reservation.id, "exception_type": type(e).__name__},
            )
            return False

    def _bind_room(self, reservation: Reservation, event_id: str, room_id: int) -> Reservation:
        try:
            attributes = self.room_binding.bind(room_id, reservation.id)
            reservation = self.store.update(EntityKind.RESERVATION, reservation.id, {"room_id": room_id})
            self.room_binding.apply_to_event(event_id, room_id, attributes)
        except Exception as e:
            self._logger.warning(
                f"Room binding failed, approval kept: {e}",
                extra={
                    "reservation_id": reservation.id,
                    "room_id": room_id,
                    "event_id": event_id,
                    "exception_type": type(e).__name__,
                },
            )
            return self._reload(reservation)
        return reservation

    def _reload(self, reservation: Reservation) -> Reservation:
        try:
            return self.store.read(EntityKind.RESERVATION, reservation.id)
        except Exception as e:
            self._logger.warning(
                f"Could not reload reservation: {e}",
                extra={"reservation_id": reservation.id},
            )
            return reservation

    # -------------------------------------------------------------------------
    # Event construction
    # -------------------------------------------------------------------------

    def _build_event_fields(
        self,
        reservation: Reservation,
        location: Optional[str] = None,
    ) -> Dict[str, Any]:
        kind = ReservationKind(reservation.kind)

        fields: Dict[str, Any] = {
            "name": reservation.event_title or f"Event - {kind.label}",
            "description": reservation.event_description or f"Approved event for {kind.value}",
            "location": (location or "").strip() or (
                self.config.AUDITORIUM_LOCATION_LABEL
                if kind is ReservationKind.AUDITORIUM
                else self.config.ROOM_LOCATION_PLACEHOLDER
            ),
            "event_date": reservation.reservation_date,
            "start_time": reservation.start_time,
            "end_time": reservation.end_time,
            "capacity": reservation.attendee_count,
            "organization_id": reservation.organization_id,
            "approval_status": EventApprovalStatus.APPROVED.value,
            "approval_comment": reservation.decision_comment,
            "reviewer_identity": reservation.reviewer_identity,
            "reservation_id": reservation.id,
        }

        if reservation.room_id is not None:
            fields["room_id"] = reservation.room_id
            try:
                fields.update(self.room_binding.get_attributes(reservation.room_id).event_fields())
            except Exception as e:
                self._logger.warning(
                    f"Pre-selected room could not be read, using placeholder location: {e}",
                    extra={"reservation_id": reservation.id, "room_id": reservation.room_id},
                )

        return fields


__all__ = ["ReservationApprovalService"]
