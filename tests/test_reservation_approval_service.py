from unittest.mock import MagicMock, patch

import pytest

from portal.core.exceptions import NotificationFailedError, RepositoryError
from portal.models.base import EntityKind, ReservationKind, ReservationStatus
from portal.services.base import ErrorCode
from portal.services.notification import NotificationDispatcher
from portal.services.reservation import ReservationApprovalService


def _events_for(store, reservation_id):
    return store.find(EntityKind.EVENT, reservation_id=reservation_id)


def _notifications_for(store, reservation_id):
    return store.find(EntityKind.NOTIFICATION, reservation_id=reservation_id)


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("status", ["approved", "rejected", "cancelled"])
def test_approve_requires_pending(approval_service, make_reservation, reviewer, store, status):
    reservation = make_reservation(status=status)

    result = approval_service.approve(reviewer, reservation.id, "ok")

    assert not result.is_success
    assert result.error.code == ErrorCode.INVALID_TRANSITION
    assert store.read(EntityKind.RESERVATION, reservation.id).status == status
    assert _events_for(store, reservation.id) == []


@pytest.mark.parametrize("status", ["approved", "rejected", "cancelled"])
def test_reject_requires_pending(approval_service, make_reservation, reviewer, store, status):
    reservation = make_reservation(status=status)

    result = approval_service.reject(reviewer, reservation.id, "no budget")

    assert result.error.code == ErrorCode.INVALID_TRANSITION
    assert store.read(EntityKind.RESERVATION, reservation.id).status == status


@pytest.mark.parametrize("status", ["rejected", "cancelled"])
def test_cancel_requires_pending_or_approved(approval_service, make_reservation, reviewer, store, status):
    reservation = make_reservation(status=status)

    result = approval_service.cancel(reviewer, reservation.id)

    assert result.error.code == ErrorCode.INVALID_TRANSITION
    assert store.read(EntityKind.RESERVATION, reservation.id).status == status


def test_unknown_reservation_is_not_found(approval_service, reviewer):
    for result in (
        approval_service.approve(reviewer, "does-not-exist"),
        approval_service.reject(reviewer, "does-not-exist", "no"),
        approval_service.cancel(reviewer, "does-not-exist"),
    ):
        assert result.error.code == ErrorCode.NOT_FOUND


def test_approve_lost_race_is_invalid_transition(approval_service, make_reservation, reviewer, store):
    reservation = make_reservation()

    with patch.object(store, "update_where", return_value=None):
        result = approval_service.approve(reviewer, reservation.id)

    assert result.error.code == ErrorCode.INVALID_TRANSITION
    assert _events_for(store, reservation.id) == []


def test_non_reviewer_cannot_approve(approval_service, make_reservation, organizer, store):
    reservation = make_reservation()

    result = approval_service.approve(organizer, reservation.id, "ok")

    assert result.error.code == ErrorCode.INSUFFICIENT_PERMISSIONS
    stored = store.read(EntityKind.RESERVATION, reservation.id)
    assert stored.status == ReservationStatus.PENDING.value
    assert not stored.has_approval_metadata


# ---------------------------------------------------------------------------
# Approve
# ---------------------------------------------------------------------------

def test_approve_creates_linked_event(approval_service, make_reservation, reviewer, store, profile):
    reservation = make_reservation(event_title="Chess Tournament")

    result = approval_service.approve(reviewer, reservation.id)

    assert result.is_success
    approved = result.data
    assert approved.status == ReservationStatus.APPROVED.value
    assert approved.decision_comment == "Reservation approved"
    assert approved.reviewer_identity == reviewer.identity
    assert approved.decided_at is not None

    events = _events_for(store, reservation.id)
    assert len(events) == 1
    event = events[0]
    assert approved.event_id == event.id
    assert event.reservation_id == approved.id
    assert event.name == "Chess Tournament"
    assert event.location == "To be defined"
    assert event.capacity == 30
    assert event.event_date == reservation.reservation_date

    notifications = _notifications_for(store, reservation.id)
    assert len(notifications) == 1
    assert notifications[0].recipient == profile.email
    assert notifications[0].title == "Reservation approved"
    assert notifications[0].message == "Your room reservation was approved. Comment: Reservation approved"


def test_approve_auditorium_defaults(approval_service, make_reservation, reviewer, store):
    reservation = make_reservation(kind=ReservationKind.AUDITORIUM.value)

    result = approval_service.approve(reviewer, reservation.id, "See you there")

    event = _events_for(store, reservation.id)[0]
    assert result.data.decision_comment == "See you there"
    assert event.name == "Event - Auditorium"
    assert event.description == "Approved event for auditorium"
    assert event.location == approval_service.config.AUDITORIUM_LOCATION_LABEL


def test_approve_uses_preselected_room_for_location(approval_service, make_reservation, reviewer, store, rooms):
    reservation = make_reservation(room_id=7)

    approval_service.approve(reviewer, reservation.id)

    event = _events_for(store, reservation.id)[0]
    assert event.room_id == 7
    assert event.location == "Room 101 - Block A (1st floor)"
    assert event.room_label == "Room 101"


def test_approve_location_replaces_placeholder(approval_service, make_reservation, reviewer, store):
    reservation = make_reservation()

    result = approval_service.approve(reviewer, reservation.id, location="  Main hall, 3rd floor ")

    assert result.is_success
    event = store.read(EntityKind.EVENT, result.data.event_id)
    assert event.location == "Main hall, 3rd floor"


@pytest.mark.parametrize("location", [None, "", "   "])
def test_approve_blank_location_uses_kind_default(approval_service, make_reservation, reviewer, store, location):
    reservation = make_reservation(kind=ReservationKind.AUDITORIUM.value)

    approval_service.approve(reviewer, reservation.id, location=location)

    event = _events_for(store, reservation.id)[0]
    assert event.location == "Auditório Steffi e Max Perlaman"


def test_bound_room_label_replaces_location(approval_service, make_reservation, reviewer, store, rooms):
    reservation = make_reservation()

    result = approval_service.approve(reviewer, reservation.id, room_id=7, location="Main hall")

    event = store.read(EntityKind.EVENT, result.data.event_id)
    assert event.location == "Room 101 - Block A (1st floor)"


def test_approve_with_room_binds_room_and_relocates_event(
    approval_service, make_reservation, reviewer, store, rooms
):
    reservation = make_reservation(kind=ReservationKind.AUDITORIUM.value)

    result = approval_service.approve(reviewer, reservation.id, "ok", room_id=7)

    assert result.is_success
    assert result.data.status == ReservationStatus.APPROVED.value
    assert result.data.room_id == 7

    event = store.read(EntityKind.EVENT, result.data.event_id)
    assert event.location == "Room 101 - Block A (1st floor)"
    assert event.room_id == 7
    assert event.room_building == "Block A"
    assert event.room_floor == "1st floor"
    assert event.room_capacity == 40
    assert store.read(EntityKind.ROOM, 7).reservation_id == reservation.id


def test_event_creation_failure_reverts_to_pending(approval_service, make_reservation, reviewer, store):
    reservation = make_reservation()
    original_create = store.create

    def failing_create(kind, fields):
        if kind is EntityKind.EVENT:
            raise RepositoryError("events table unavailable")
        return original_create(kind, fields)

    with patch.object(store, "create", side_effect=failing_create):
        result = approval_service.approve(reviewer, reservation.id, "ok")

    assert result.error.code == ErrorCode.DEPENDENT_WRITE_FAILED
    assert "events table unavailable" in result.error.details["original_error"]
    assert result.error.details["compensated"] is True

    stored = store.read(EntityKind.RESERVATION, reservation.id)
    assert stored.status == ReservationStatus.PENDING.value
    assert not stored.has_approval_metadata
    assert stored.event_id is None
    assert _events_for(store, reservation.id) == []
    assert _notifications_for(store, reservation.id) == []


def test_reread_failure_after_approval_reverts_to_pending(approval_service, make_reservation, reviewer, store):
    reservation = make_reservation()
    original_read = store.read
    reads = []

    def failing_second_read(kind, id):
        if kind is EntityKind.RESERVATION:
            reads.append(id)
            if len(reads) == 2:
                raise RepositoryError("read timeout")
        return original_read(kind, id)

    with patch.object(store, "read", side_effect=failing_second_read):
        result = approval_service.approve(reviewer, reservation.id, "ok")

    assert result.error.code == ErrorCode.DEPENDENT_WRITE_FAILED
    assert "read timeout" in result.error.details["original_error"]
    assert result.error.details["compensated"] is True

    stored = store.read(EntityKind.RESERVATION, reservation.id)
    assert stored.status == ReservationStatus.PENDING.value
    assert not stored.has_approval_metadata
    assert _events_for(store, reservation.id) == []
    assert _notifications_for(store, reservation.id) == []


def test_failed_compensation_is_reported(approval_service, make_reservation, reviewer, store):
    reservation = make_reservation()
    original_create = store.create
    original_update_where = store.update_where

    def failing_create(kind, fields):
        if kind is EntityKind.EVENT:
            raise RepositoryError("events table unavailable")
        return original_create(kind, fields)

    def failing_revert(kind, id, fields, conditions):
        if fields.get("status") == ReservationStatus.PENDING.value:
            raise RepositoryError("connection lost")
        return original_update_where(kind, id, fields, conditions)

    with patch.object(store, "create", side_effect=failing_create), \
            patch.object(store, "update_where", side_effect=failing_revert):
        result = approval_service.approve(reviewer, reservation.id)

    assert result.error.code == ErrorCode.DEPENDENT_WRITE_FAILED
    assert result.error.details["compensated"] is False


def test_event_link_failure_keeps_approval(approval_service, make_reservation, reviewer, store):
    reservation = make_reservation()
    original_update = store.update

    def failing_update(kind, id, fields):
        if kind is EntityKind.RESERVATION and "event_id" in fields:
            raise RepositoryError("write timeout")
        return original_update(kind, id, fields)

    with patch.object(store, "update", side_effect=failing_update):
        result = approval_service.approve(reviewer, reservation.id)

    assert result.is_success
    assert result.data.status == ReservationStatus.APPROVED.value
    assert result.data.event_id is None
    assert len(_events_for(store, reservation.id)) == 1


def test_notification_failure_does_not_affect_approval(make_reservation, reviewer, store, room_binding):
    channel = MagicMock()
    channel.deliver.side_effect = NotificationFailedError("smtp down")
    service = ReservationApprovalService(
        store,
        NotificationDispatcher(channel),
        room_binding=room_binding,
    )
    reservation = make_reservation()

    result = service.approve(reviewer, reservation.id)

    assert result.is_success
    assert result.data.event_id is not None
    channel.deliver.assert_called_once()


def test_missing_recipient_skips_dispatch(make_reservation, reviewer, store, room_binding):
    dispatcher = MagicMock(spec=NotificationDispatcher)
    service = ReservationApprovalService(store, dispatcher, room_binding=room_binding)
    reservation = make_reservation(profile_id=None, requester_name="  ")

    result = service.approve(reviewer, reservation.id)

    assert result.is_success
    dispatcher.dispatch.assert_not_called()


def test_room_binding_failure_keeps_approval(approval_service, make_reservation, reviewer, store, rooms):
    reservation = make_reservation()

    result = approval_service.approve(reviewer, reservation.id, room_id=999)

    assert result.is_success
    assert result.data.status == ReservationStatus.APPROVED.value
    assert result.data.room_id is None
    event = store.read(EntityKind.EVENT, result.data.event_id)
    assert event.location == "To be defined"


def test_event_relocation_failure_keeps_room_binding(approval_service, make_reservation, reviewer, store, rooms):
    reservation = make_reservation()

    with patch.object(approval_service.room_binding, "apply_to_event", side_effect=RepositoryError("boom")):
        result = approval_service.approve(reviewer, reservation.id, room_id=7)

    assert result.is_success
    assert store.read(EntityKind.ROOM, 7).reservation_id == reservation.id
    event = store.read(EntityKind.EVENT, result.data.event_id)
    assert event.location == "To be defined"


# ---------------------------------------------------------------------------
# Reject
# ---------------------------------------------------------------------------

def test_reject_stores_comment_without_event(approval_service, make_reservation, reviewer, store):
    reservation = make_reservation()

    result = approval_service.reject(reviewer, reservation.id, "no budget")

    assert result.is_success
    assert result.data.status == ReservationStatus.REJECTED.value
    assert result.data.decision_comment == "no budget"
    assert result.data.reviewer_identity == reviewer.identity
    assert result.data.event_id is None
    assert _events_for(store, reservation.id) == []

    notification = _notifications_for(store, reservation.id)[0]
    assert notification.title == "Reservation not approved"
    assert notification.message.endswith("Reason: no budget")


@pytest.mark.parametrize("comment", ["", "   ", None])
def test_reject_requires_comment(approval_service, make_reservation, reviewer, store, comment):
    reservation = make_reservation()

    result = approval_service.reject(reviewer, reservation.id, comment)

    assert result.error.code == ErrorCode.VALIDATION_ERROR
    assert store.read(EntityKind.RESERVATION, reservation.id).status == ReservationStatus.PENDING.value


def test_reject_twice_is_invalid_transition(approval_service, make_reservation, reviewer):
    reservation = make_reservation()

    assert approval_service.reject(reviewer, reservation.id, "no budget").is_success
    result = approval_service.reject(reviewer, reservation.id, "no budget")

    assert result.error.code == ErrorCode.INVALID_TRANSITION


# ---------------------------------------------------------------------------
# Cancel
# ---------------------------------------------------------------------------

def test_cancel_approved_then_cancel_again(approval_service, make_reservation, reviewer, organizer, store):
    reservation = make_reservation()
    approved = approval_service.approve(reviewer, reservation.id).data
    event_id = approved.event_id
    notifications_before = len(_notifications_for(store, reservation.id))

    result = approval_service.cancel(organizer, reservation.id)

    assert result.is_success
    cancelled = result.data
    assert cancelled.status == ReservationStatus.CANCELLED.value
    assert cancelled.cancellation_reason == "Cancelled by user"
    assert cancelled.cancelled_by == organizer.identity
    assert not cancelled.has_approval_metadata
    assert cancelled.event_id is None
    assert store.read(EntityKind.EVENT, event_id).reservation_id == reservation.id
    assert len(_notifications_for(store, reservation.id)) == notifications_before

    second = approval_service.cancel(organizer, reservation.id)
    assert second.error.code == ErrorCode.INVALID_TRANSITION


def test_cancel_pending_with_reason(approval_service, make_reservation, organizer):
    reservation = make_reservation()

    result = approval_service.cancel(organizer, reservation.id, "Event postponed")

    assert result.data.status == ReservationStatus.CANCELLED.value
    assert result.data.cancellation_reason == "Event postponed"
