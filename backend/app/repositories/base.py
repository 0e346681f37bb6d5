"""Base repository with shared get-by-ID and upsert patterns.

Subclasses specify model_class, id_column, and not_found_error; the base
provides the common lookups plus a dialect-aware ``INSERT ... ON CONFLICT``
builder used for every natural-key upsert.
"""

from typing import TypeVar, Generic, Optional, Type
from sqlalchemy.orm import Session, Query

from ..database import Base
from ..exceptions import SiteException, DatabaseError

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """Shared repository logic for SQLAlchemy models.

    Class variables to set in subclasses:
        model_class:     The SQLAlchemy model (e.g., ContentDraft)
        id_column:       Name of the primary-key column (default "id")
        not_found_error: Exception class to raise from get_by_id
    """

    model_class: Type[ModelT]
    id_column: str = "id"
    not_found_error: Type[SiteException]

    def __init__(self, db: Session):
        self.db = db

    def _base_query(self) -> Query:
        return self.db.query(self.model_class)

    def get_by_id(self, entity_id) -> ModelT:
        """Get entity by primary key. Raises not_found_error if missing."""
        col = getattr(self.model_class, self.id_column)
        entity = self._base_query().filter(col == entity_id).first()
        if not entity:
            raise self.not_found_error(str(entity_id))
        return entity

    def get_by_id_optional(self, entity_id) -> Optional[ModelT]:
        """Get entity by primary key, or None if not found."""
        col = getattr(self.model_class, self.id_column)
        return self._base_query().filter(col == entity_id).first()

    def _insert(self):
        """Return an INSERT construct for model_class that supports ON CONFLICT.

        PostgreSQL and SQLite share the ``on_conflict_do_update`` /
        ``on_conflict_do_nothing`` API; other backends are not supported.
        """
        dialect = self.db.get_bind().dialect.name
        if dialect == "postgresql":
            from sqlalchemy.dialects.postgresql import insert
        elif dialect == "sqlite":
            from sqlalchemy.dialects.sqlite import insert
        else:
            raise DatabaseError(f"Upsert not supported on dialect '{dialect}'")
        return insert(self.model_class.__table__)
