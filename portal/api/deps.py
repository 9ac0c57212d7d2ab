"""
FastAPI dependencies.

Example usage in a router:
    @router.post("/{reservation_id}/approve")
    def approve(service = Depends(deps.get_approval_service)):
        ...
"""

from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from portal.core.permissions import CallerContext, RoleBasedAuthorizer
from portal.db.session import get_db
from portal.repositories.record_store import SqlAlchemyRecordStore
from portal.services.notification import NotificationDispatcher, build_channel
from portal.services.reservation import (
    RecipientResolver,
    ReservationApprovalService,
    ReservationIntakeService,
    RoomBindingService,
    RoomChangeService,
    EventLinkService,
)


# --- Database & context --------------------------------------------------------

def get_record_store(db: Session = Depends(get_db)) -> SqlAlchemyRecordStore:
    return SqlAlchemyRecordStore(db)


def get_caller_context(
    x_caller_identity: Optional[str] = Header(None),
    x_caller_role: Optional[str] = Header(None),
    x_organization_id: Optional[int] = Header(None),
) -> CallerContext:
    """Build the caller from headers set by the authenticating proxy."""
    if not x_caller_identity or not x_caller_role:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-Caller-Identity and X-Caller-Role headers are required",
        )
    return CallerContext(
        identity=x_caller_identity,
        role=x_caller_role,
        organization_id=x_organization_id,
    )


# --- Services ------------------------------------------------------------------

def get_room_binding_service(
    store: SqlAlchemyRecordStore = Depends(get_record_store),
) -> RoomBindingService:
    return RoomBindingService(store)


def get_approval_service(
    store: SqlAlchemyRecordStore = Depends(get_record_store),
) -> ReservationApprovalService:
    room_binding = RoomBindingService(store)
    return ReservationApprovalService(
        store,
        NotificationDispatcher(build_channel(store)),
        resolver=RecipientResolver(store),
        room_binding=room_binding,
        authorizer=RoleBasedAuthorizer(),
    )


def get_intake_service(
    store: SqlAlchemyRecordStore = Depends(get_record_store),
) -> ReservationIntakeService:
    return ReservationIntakeService(store)


def get_room_change_service(
    store: SqlAlchemyRecordStore = Depends(get_record_store),
) -> RoomChangeService:
    return RoomChangeService(store, room_binding=RoomBindingService(store))


def get_event_link_service(
    store: SqlAlchemyRecordStore = Depends(get_record_store),
) -> EventLinkService:
    return EventLinkService(store)
