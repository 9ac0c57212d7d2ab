"""
Reservation intake.

All submission paths (room and auditorium forms and their revisions)
produce a ``ReservationRequest`` and come through ``submit``.
"""

from typing import Any, Dict, Union

from pydantic import ValidationError as PydanticValidationError

from portal.core.exceptions import ValidationError
from portal.core.permissions import CallerContext
from portal.models.base.enums import EntityKind, ReservationStatus
from portal.models.reservation import Reservation
from portal.schemas.reservation import ReservationRequest
from portal.services.base import BaseService, ServiceResult


class ReservationIntakeService(BaseService):
    """Creates pending reservations from validated requests."""

    def submit(
        self,
        caller: CallerContext,
        request: Union[ReservationRequest, Dict[str, Any]],
    ) -> ServiceResult[Reservation]:
        try:
            if not isinstance(request, ReservationRequest):
                request = self._validate(request)

            if request.room_id is not None:
                self.store.read(EntityKind.ROOM, request.room_id)

            fields = request.model_dump()
            fields["kind"] = request.kind.value
            fields["status"] = ReservationStatus.PENDING.value

            reservation = self.store.create(EntityKind.RESERVATION, fields)

            self._log_operation(
                "submit reservation",
                reservation.id,
                {"kind": reservation.kind, "submitted_by": caller.identity},
            )
            return ServiceResult.success(reservation, message="Reservation submitted")

        except Exception as e:
            return self._handle_exception(e, "submit reservation")

    @staticmethod
    def _validate(payload: Dict[str, Any]) -> ReservationRequest:
        try:
            return ReservationRequest.model_validate(payload)
        except PydanticValidationError as e:
            field_errors: Dict[str, list] = {}
            for error in e.errors():
                field = ".".join(str(part) for part in error["loc"]) or "__root__"
                field_errors.setdefault(field, []).append(error["msg"])
            raise ValidationError("Invalid reservation request", field_errors=field_errors) from e


__all__ = ["ReservationIntakeService"]
