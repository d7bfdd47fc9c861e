"""
Base repository pattern implementation.

Repositories wrap the request-scoped SQLAlchemy session and are the only
place handlers touch the database. Backend failures are rolled back and
re-raised as RepositoryError carrying the driver's message verbatim.
"""

import logging
from abc import ABC
from typing import TypeVar, Generic, Optional, Dict, Any, Type
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

logger = logging.getLogger(__name__)

# Type variable for generic entity type
T = TypeVar('T')


class RepositoryError(Exception):
    """Base exception for repository operations."""
    pass


class NotFoundError(RepositoryError):
    """Exception raised when entity is not found."""

    def __init__(self, entity_type: str, entity_id: Any):
        super().__init__(f"{entity_type} with id {entity_id} not found")
        self.entity_type = entity_type
        self.entity_id = entity_id


class DuplicateError(RepositoryError):
    """Exception raised when attempting to create duplicate entity."""

    def __init__(self, entity_type: str, criteria: Dict[str, Any]):
        super().__init__(f"{entity_type} already exists with criteria: {criteria}")
        self.entity_type = entity_type
        self.criteria = criteria


def raw_message(error: SQLAlchemyError) -> str:
    orig = getattr(error, "orig", None)
    return str(orig) if orig is not None else str(error)


class BaseRepository(ABC, Generic[T]):
    """
    Abstract base repository providing common database operations.

    Subclasses pin the model class and add the access patterns their
    endpoints need; nothing here builds arbitrary joins.
    """

    def __init__(self, db: Session, model: Type[T]):
        """
        Initialize repository with database session and model class.

        Args:
            db: SQLAlchemy database session
            model: SQLAlchemy model class
        """
        self.db = db
        self.model = model

    def get_by_id(self, entity_id: Any) -> T:
        """
        Get entity by ID.

        Raises:
            NotFoundError: If entity not found
        """
        entity = self.get_by_id_optional(entity_id)
        if entity is None:
            raise NotFoundError(self.model.__name__, entity_id)
        return entity

    def get_by_id_optional(self, entity_id: Any) -> Optional[T]:
        return self.db.query(self.model).filter(
            self.model.id == entity_id
        ).first()

    def create(self, entity: T) -> T:
        """
        Create a new entity.

        Raises:
            DuplicateError: If entity violates unique constraints
            RepositoryError: If database operation fails
        """
        try:
            self.db.add(entity)
            self.db.commit()
            self.db.refresh(entity)
            return entity
        except IntegrityError as e:
            self.db.rollback()
            logger.info(f"Duplicate {self.model.__name__}: {raw_message(e)}")
            raise DuplicateError(self.model.__name__, self._extract_entity_dict(entity))
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(raw_message(e))

    def apply(self, entity: T, updates: Dict[str, Any]) -> T:
        columns = self.model.__table__.columns.keys()
        try:
            for key, value in updates.items():
                if key in columns:
                    setattr(entity, key, value)

            self.db.commit()
            self.db.refresh(entity)
            return entity
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(raw_message(e))

    def delete_by(self, **criteria) -> int:
        """Filtered delete; returns the number of affected rows, which may be zero."""
        try:
            deleted = self._filtered(**criteria).delete(synchronize_session=False)
            self.db.commit()
            return deleted
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(raw_message(e))

    def find_one_by(self, **criteria) -> Optional[T]:
        return self._filtered(**criteria).first()

    def commit(self) -> None:
        """Commit the current transaction."""
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(raw_message(e))

    def _filtered(self, **criteria):
        query = self.db.query(self.model)

        for key, value in criteria.items():
            if hasattr(self.model, key):
                query = query.filter(getattr(self.model, key) == value)

        return query

    def _extract_entity_dict(self, entity: T) -> Dict[str, Any]:
        return {
            key: getattr(entity, key, None)
            for key in self.model.__table__.columns.keys()
        }
