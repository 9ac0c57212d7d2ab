from datetime import date, time, timedelta

import pytest
from sqlalchemy.orm import sessionmaker

from portal.core.permissions import CallerContext, RoleBasedAuthorizer
from portal.db.init_db import drop_db, init_db
from portal.db.session import build_engine
from portal.models import Profile, Room
from portal.models.base import EntityKind, ReservationKind, ReservationStatus, UserRole
from portal.repositories.record_store import SqlAlchemyRecordStore
from portal.services.notification import InAppNotificationChannel, NotificationDispatcher
from portal.services.reservation import (
    RecipientResolver,
    ReservationApprovalService,
    ReservationIntakeService,
    RoomBindingService,
    RoomChangeService,
    EventLinkService,
)

REVIEWER_ROLES = [UserRole.SUPER_ADMIN.value, UserRole.REVIEWER.value]


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    init_db(bind=engine)
    yield engine
    drop_db(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def store(db_session) -> SqlAlchemyRecordStore:
    return SqlAlchemyRecordStore(db_session)


@pytest.fixture
def profile(db_session) -> Profile:
    profile = Profile(email="lead@chess-club.example.org", display_name="Chess Club Lead")
    db_session.add(profile)
    db_session.commit()
    return profile


@pytest.fixture
def rooms(db_session):
    rooms = {
        7: Room(id=7, label="Room 101", building="Block A", floor="1st floor", capacity=40),
        8: Room(id=8, label="Room 202", building="Block B", floor="2nd floor", capacity=10),
        9: Room(id=9, label="Lab 3", building="Block C", floor="Ground floor", capacity=60),
    }
    db_session.add_all(rooms.values())
    db_session.commit()
    return rooms


@pytest.fixture
def reservation_date() -> date:
    return date.today() + timedelta(days=14)


@pytest.fixture
def make_reservation(store, profile, reservation_date):
    """Factory inserting a reservation directly through the store."""

    def _make(**overrides):
        fields = {
            "kind": ReservationKind.ROOM.value,
            "reservation_date": reservation_date,
            "start_time": time(14, 0),
            "end_time": time(16, 0),
            "attendee_count": 30,
            "requester_name": "Ana Souza",
            "requester_phone": "+55 11 99999-0000",
            "profile_id": profile.id,
            "organization_id": 1,
            "motive": "Weekly meeting",
            "details": {"equipment": ["projector"]},
            "status": ReservationStatus.PENDING.value,
        }
        fields.update(overrides)
        return store.create(EntityKind.RESERVATION, fields)

    return _make


@pytest.fixture
def reviewer() -> CallerContext:
    return CallerContext(identity="reviewer@portal.example.org", role=UserRole.REVIEWER.value)


@pytest.fixture
def organizer() -> CallerContext:
    return CallerContext(
        identity="lead@chess-club.example.org",
        role=UserRole.ORGANIZATION.value,
        organization_id=1,
    )


@pytest.fixture
def dispatcher(store) -> NotificationDispatcher:
    return NotificationDispatcher(InAppNotificationChannel(store))


@pytest.fixture
def room_binding(store) -> RoomBindingService:
    return RoomBindingService(store)


@pytest.fixture
def approval_service(store, dispatcher, room_binding) -> ReservationApprovalService:
    return ReservationApprovalService(
        store,
        dispatcher,
        resolver=RecipientResolver(store),
        room_binding=room_binding,
        authorizer=RoleBasedAuthorizer(REVIEWER_ROLES),
    )


@pytest.fixture
def intake_service(store) -> ReservationIntakeService:
    return ReservationIntakeService(store)


@pytest.fixture
def room_change_service(store, room_binding) -> RoomChangeService:
    return RoomChangeService(
        store,
        room_binding=room_binding,
        authorizer=RoleBasedAuthorizer(REVIEWER_ROLES),
    )


@pytest.fixture
def event_link_service(store) -> EventLinkService:
    return EventLinkService(store, authorizer=RoleBasedAuthorizer(REVIEWER_ROLES))
