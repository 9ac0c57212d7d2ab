"""
Base repository with standardized CRUD operations and error handling.

Each write commits on its own. Multi-entity consistency is the caller's
responsibility; nothing here spans more than one row.
"""

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union

from sqlalchemy import update
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from portal.models.base import BaseModel
from portal.core.logging import get_logger
from portal.core.exceptions import RepositoryError, EntityNotFoundError

logger = get_logger(__name__)

# Type variable for model classes
ModelType = TypeVar("ModelType", bound=BaseModel)

EntityId = Union[str, int]


class BaseRepository(Generic[ModelType]):
    """
    Repository over a single SQLAlchemy model.

    Storage failures surface as ``RepositoryError``; ids that do not resolve
    surface as ``EntityNotFoundError``.
    """

    def __init__(self, model: Type[ModelType], db: Session):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            db: Database session
        """
        self.model = model
        self.db = db

    # ==================== Create Operations ====================

    def create(self, data: Dict[str, Any]) -> ModelType:
        """
        Insert a new row built from ``data`` and commit.

        Raises:
            RepositoryError: If the insert fails
        """
        try:
            entity = self.model(**data)
            self.db.add(entity)
            self.db.commit()
            self.db.refresh(entity)

            logger.info(f"Created {self.model.__name__} with id: {entity.id}")
            return entity

        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(
                f"Create failed: {str(e)}",
                details={"model": self.model.__name__},
            ) from e

    # ==================== Read Operations ====================

    def find_by_id(self, id: EntityId) -> Optional[ModelType]:
        """Find entity by ID, returning None when absent."""
        try:
            return self.db.get(self.model, id)
        except SQLAlchemyError as e:
            raise RepositoryError(f"Find by ID failed: {str(e)}") from e

    def get_by_id(self, id: EntityId) -> ModelType:
        """
        Get entity by ID or raise exception.

        Raises:
            EntityNotFoundError: If entity not found
        """
        entity = self.find_by_id(id)
        if entity is None:
            raise EntityNotFoundError(self.model.__name__, id)
        return entity

    def find_by_criteria(
        self,
        criteria: Dict[str, Any],
        limit: Optional[int] = None,
    ) -> List[ModelType]:
        """
        Find entities matching all criteria.

        A list, tuple or set value matches any of its members.
        """
        try:
            query = self.db.query(self.model)
            for clause in self._build_conditions(criteria):
                query = query.filter(clause)
            if limit is not None:
                query = query.limit(limit)
            return query.all()

        except SQLAlchemyError as e:
            raise RepositoryError(f"Find by criteria failed: {str(e)}") from e

    # ==================== Update Operations ====================

    def update(self, id: EntityId, data: Dict[str, Any]) -> ModelType:
        """
        Update entity fields and commit.

        Raises:
            EntityNotFoundError: If entity not found
            RepositoryError: If the update fails
        """
        entity = self.get_by_id(id)

        unknown = [key for key in data if not hasattr(entity, key)]
        if unknown:
            raise RepositoryError(
                f"{self.model.__name__} has no field '{unknown[0]}'",
                details={"fields": unknown},
            )

        try:
            for key, value in data.items():
                setattr(entity, key, value)

            self.db.commit()
            self.db.refresh(entity)

            logger.info(f"Updated {self.model.__name__} with id: {id}")
            return entity

        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Update failed: {str(e)}") from e
        except Exception:
            self.db.rollback()
            raise

    def update_where(
        self,
        id: EntityId,
        data: Dict[str, Any],
        conditions: Dict[str, Any],
    ) -> Optional[ModelType]:
        """
        Conditionally update a single row in one statement.

        The row is only written if it still matches ``conditions``. Returns
        the refreshed entity, or None when no row matched.

        Raises:
            RepositoryError: If the update fails
        """
        try:
            stmt = (
                update(self.model)
                .where(self.model.id == id, *self._build_conditions(conditions))
                .values(**data)
                .execution_options(synchronize_session=False)
            )
            result = self.db.execute(stmt)
            self.db.commit()

            if result.rowcount == 0:
                logger.info(
                    f"Conditional update of {self.model.__name__} {id} matched no rows",
                    extra={"conditions": {k: str(v) for k, v in conditions.items()}},
                )
                return None

            entity = self.db.get(self.model, id)
            if entity is not None:
                self.db.refresh(entity)

            logger.info(f"Conditionally updated {self.model.__name__} with id: {id}")
            return entity

        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Conditional update failed: {str(e)}") from e

    # ==================== Utility Methods ====================

    def _build_conditions(self, criteria: Dict[str, Any]) -> List[Any]:
        clauses = []
        for field, value in criteria.items():
            column = getattr(self.model, field, None)
            if column is None:
                raise RepositoryError(
                    f"{self.model.__name__} has no field '{field}'",
                    details={"field": field},
                )
            if isinstance(value, (list, tuple, set, frozenset)):
                clauses.append(column.in_(list(value)))
            elif value is None:
                clauses.append(column.is_(None))
            else:
                clauses.append(column == value)
        return clauses
