from datetime import date, time, timedelta

import pytest

from portal.models.base import ReservationKind, ReservationStatus
from portal.schemas.reservation import ReservationRequest
from portal.services.base import ErrorCode


@pytest.fixture
def payload(reservation_date, profile):
    return {
        "kind": "auditorium",
        "reservation_date": reservation_date.isoformat(),
        "start_time": "09:00",
        "end_time": "12:00",
        "attendee_count": 120,
        "requester_name": "Ana Souza",
        "requester_phone": "+55 11 99999-0000",
        "profile_id": profile.id,
        "organization_id": 1,
        "event_title": "Career Fair",
        "details": {"speakers": [{"name": "Dr. Lima"}], "catering": True},
    }


def test_submit_creates_pending_reservation(intake_service, organizer, payload):
    result = intake_service.submit(organizer, payload)

    assert result.is_success
    reservation = result.data
    assert reservation.status == ReservationStatus.PENDING.value
    assert reservation.kind == ReservationKind.AUDITORIUM.value
    assert reservation.start_time == time(9, 0)
    assert reservation.details == payload["details"]
    assert reservation.event_id is None
    assert not reservation.has_approval_metadata


def test_submit_accepts_validated_request(intake_service, organizer, payload):
    request = ReservationRequest.model_validate(payload)

    assert intake_service.submit(organizer, request).is_success


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"end_time": "08:00"}, "__root__"),
        ({"attendee_count": 0}, "attendee_count"),
        ({"reservation_date": (date.today() - timedelta(days=1)).isoformat()}, "reservation_date"),
        ({"kind": "stadium"}, "kind"),
    ],
)
def test_submit_rejects_invalid_requests(intake_service, organizer, payload, overrides, field):
    payload.update(overrides)

    result = intake_service.submit(organizer, payload)

    assert result.error.code == ErrorCode.VALIDATION_ERROR
    assert field in result.error.details["field_errors"]


def test_submit_with_unknown_room(intake_service, organizer, payload):
    payload["room_id"] = 404

    result = intake_service.submit(organizer, payload)

    assert result.error.code == ErrorCode.NOT_FOUND


def test_submit_with_preselected_room(intake_service, organizer, payload, rooms):
    payload["room_id"] = 7

    result = intake_service.submit(organizer, payload)

    assert result.data.room_id == 7
