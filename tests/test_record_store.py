from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from portal.core.exceptions import EntityNotFoundError, RepositoryError
from portal.models.base import EntityKind, ReservationStatus


def test_read_unknown_id_raises_not_found(store):
    with pytest.raises(EntityNotFoundError):
        store.read(EntityKind.RESERVATION, "missing")


def test_update_unknown_field_raises(store, make_reservation):
    reservation = make_reservation()

    with pytest.raises(RepositoryError):
        store.update(EntityKind.RESERVATION, reservation.id, {"no_such_field": 1})


def test_rejected_update_leaves_no_pending_changes(store, make_reservation, db_session):
    reservation = make_reservation()

    with pytest.raises(RepositoryError):
        store.update(
            EntityKind.RESERVATION,
            reservation.id,
            {"observations": "leaked", "bogus": 1},
        )

    # An unrelated commit on the same session must not carry the valid field.
    make_reservation(requester_name="Bruno Lima")
    db_session.expire_all()

    assert store.read(EntityKind.RESERVATION, reservation.id).observations is None


def test_update_rolls_back_when_commit_fails(store, make_reservation, db_session):
    reservation = make_reservation()

    with patch.object(db_session, "commit", side_effect=RuntimeError("disk full")):
        with pytest.raises(RuntimeError):
            store.update(EntityKind.RESERVATION, reservation.id, {"observations": "lost"})

    make_reservation(requester_name="Bruno Lima")
    db_session.expire_all()

    assert store.read(EntityKind.RESERVATION, reservation.id).observations is None


def test_update_where_applies_when_conditions_match(store, make_reservation):
    reservation = make_reservation()

    updated = store.update_where(
        EntityKind.RESERVATION,
        reservation.id,
        {"status": ReservationStatus.APPROVED.value},
        {"status": [ReservationStatus.PENDING.value]},
    )

    assert updated.status == ReservationStatus.APPROVED.value


def test_update_where_returns_none_on_mismatch(store, make_reservation):
    reservation = make_reservation(status=ReservationStatus.REJECTED.value)

    updated = store.update_where(
        EntityKind.RESERVATION,
        reservation.id,
        {"status": ReservationStatus.APPROVED.value},
        {"status": ReservationStatus.PENDING.value},
    )

    assert updated is None
    assert store.read(EntityKind.RESERVATION, reservation.id).status == ReservationStatus.REJECTED.value


def test_find_by_criteria(store, make_reservation):
    make_reservation(organization_id=1)
    make_reservation(organization_id=2, status=ReservationStatus.APPROVED.value)

    assert len(store.find(EntityKind.RESERVATION, organization_id=2)) == 1
    assert len(store.find(EntityKind.RESERVATION, status=["pending", "approved"])) == 2


def test_storage_errors_become_repository_errors(store, db_session):
    with patch.object(db_session, "commit", side_effect=OperationalError("INSERT", {}, Exception("disk full"))):
        with pytest.raises(RepositoryError):
            store.create(EntityKind.NOTIFICATION, {"recipient": "a", "title": "t", "message": "m"})
