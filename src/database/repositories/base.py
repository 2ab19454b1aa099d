"""
Base repository with generic CRUD operations.

Provides a reusable base class for all repositories with
common database operations, including tenant-scoped lookups
for models carrying an ``organization_id`` column.
"""

from typing import Generic, TypeVar

from sqlalchemy.orm import Session

from src.database.models.base import Base

# Generic type variable bound to Base model
ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """Generic repository providing common CRUD operations.

    Attributes:
        model: SQLAlchemy model class.
        session: Database session.
    """

    model: type[ModelT]

    def __init__(self, session: Session) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session instance.
        """
        self._session = session

    @property
    def session(self) -> Session:
        """Get the database session."""
        return self._session

    def get_by_id(self, entity_id: int) -> ModelT | None:
        """Retrieve entity by primary key.

        Args:
            entity_id: Primary key value.

        Returns:
            Entity instance or None if not found.
        """
        return self._session.get(self.model, entity_id)

    def get_for_organization(self, entity_id: int, organization_id: int) -> ModelT | None:
        """Retrieve entity by primary key within one tenant.

        A row owned by another organization is reported as missing.

        Args:
            entity_id: Primary key value.
            organization_id: Owning tenant.

        Returns:
            Entity instance or None if absent or owned elsewhere.
        """
        entity = self.get_by_id(entity_id)
        if entity is None or getattr(entity, "organization_id", None) != organization_id:
            return None
        return entity

    def create(self, entity: ModelT) -> ModelT:
        """Create a new entity.

        Args:
            entity: Entity instance to persist.

        Returns:
            Persisted entity with generated ID.
        """
        self._session.add(entity)
        self._session.flush()
        return entity
