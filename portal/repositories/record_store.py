"""
Record store adapter.

The workflow services talk to storage only through ``RecordStore``:
create, read and update-by-id for each entity kind, plus a conditional
update used to enforce status preconditions atomically. The adapter holds
no business logic, performs no retries and caches nothing.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Type, Union

from sqlalchemy.orm import Session

from portal.models.base import BaseModel, EntityKind
from portal.models.event import Event
from portal.models.notification import Notification
from portal.models.reservation import Reservation
from portal.models.room import Room
from portal.models.user import Profile
from portal.repositories.base.base_repository import BaseRepository, EntityId


class RecordStore(ABC):
    """Persistence boundary for the reservation workflow."""

    @abstractmethod
    def create(self, kind: EntityKind, fields: Dict[str, Any]) -> Any:
        """Create a record and return it."""

    @abstractmethod
    def read(self, kind: EntityKind, id: EntityId) -> Any:
        """Return the record or raise ``EntityNotFoundError``."""

    @abstractmethod
    def update(self, kind: EntityKind, id: EntityId, fields: Dict[str, Any]) -> Any:
        """Update a record by id and return it."""

    @abstractmethod
    def update_where(
        self,
        kind: EntityKind,
        id: EntityId,
        fields: Dict[str, Any],
        conditions: Dict[str, Any],
    ) -> Optional[Any]:
        """Update a record only if it matches ``conditions``; None otherwise."""

    @abstractmethod
    def find(self, kind: EntityKind, **criteria: Any) -> List[Any]:
        """Return all records of ``kind`` matching ``criteria``."""


class SqlAlchemyRecordStore(RecordStore):
    """``RecordStore`` backed by one SQLAlchemy session."""

    MODELS: Dict[EntityKind, Type[BaseModel]] = {
        EntityKind.RESERVATION: Reservation,
        EntityKind.EVENT: Event,
        EntityKind.ROOM: Room,
        EntityKind.PROFILE: Profile,
        EntityKind.NOTIFICATION: Notification,
    }

    def __init__(self, db: Session):
        self.db = db
        self._repositories: Dict[EntityKind, BaseRepository] = {
            kind: BaseRepository(model, db) for kind, model in self.MODELS.items()
        }

    def repository(self, kind: Union[EntityKind, str]) -> BaseRepository:
        return self._repositories[EntityKind(kind)]

    def create(self, kind, fields):
        return self.repository(kind).create(fields)

    def read(self, kind, id):
        return self.repository(kind).get_by_id(id)

    def update(self, kind, id, fields):
        return self.repository(kind).update(id, fields)

    def update_where(self, kind, id, fields, conditions):
        return self.repository(kind).update_where(id, fields, conditions)

    def find(self, kind, **criteria):
        return self.repository(kind).find_by_criteria(criteria)


__all__ = ["RecordStore", "SqlAlchemyRecordStore"]
