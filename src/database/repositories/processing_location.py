"""Processing location repository.

Tenant-scoped queries over processing locations plus the
conditional deactivation used by atomic moves.
"""

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from src.database.models import ProcessingLocation, Recipient
from src.database.repositories.base import BaseRepository


class ProcessingLocationRepository(BaseRepository[ProcessingLocation]):
    """Repository for ProcessingLocation entity operations."""

    model = ProcessingLocation

    def __init__(self, session: Session) -> None:
        """Initialize processing location repository.

        Args:
            session: SQLAlchemy session instance.
        """
        super().__init__(session)

    def get_for_update(self, location_id: int, organization_id: int) -> ProcessingLocation | None:
        """Load a location with a row lock held until the transaction ends.

        The lock is a no-op on SQLite.

        Args:
            location_id: Location primary key.
            organization_id: Owning tenant.

        Returns:
            Locked location or None if absent or owned elsewhere.
        """
        stmt = (
            select(ProcessingLocation)
            .where(
                ProcessingLocation.id == location_id,
                ProcessingLocation.organization_id == organization_id,
            )
            .with_for_update(of=ProcessingLocation)
            .execution_options(populate_existing=True)
        )
        return self._session.scalars(stmt).unique().first()

    def list_for_recipient(
        self,
        recipient_id: int,
        organization_id: int,
        is_active: bool | None = None,
        newest_first: bool = False,
    ) -> list[ProcessingLocation]:
        """List locations of a recipient.

        Args:
            recipient_id: Owning recipient.
            organization_id: Owning tenant.
            is_active: Optional active-flag filter.
            newest_first: Sort by creation time descending.

        Returns:
            Locations in creation order.
        """
        stmt = select(ProcessingLocation).where(
            ProcessingLocation.recipient_id == recipient_id,
            ProcessingLocation.organization_id == organization_id,
        )
        if is_active is not None:
            stmt = stmt.where(ProcessingLocation.is_active.is_(is_active))
        if newest_first:
            stmt = stmt.order_by(ProcessingLocation.created_at.desc(), ProcessingLocation.id.desc())
        else:
            stmt = stmt.order_by(ProcessingLocation.created_at, ProcessingLocation.id)
        return list(self._session.scalars(stmt).unique().all())

    def list_active_for_recipients(
        self,
        recipient_ids: list[int],
        organization_id: int,
    ) -> list[ProcessingLocation]:
        """List active locations for several recipients in one query.

        Args:
            recipient_ids: Owning recipients.
            organization_id: Owning tenant.

        Returns:
            Active locations in creation order.
        """
        if not recipient_ids:
            return []
        stmt = (
            select(ProcessingLocation)
            .where(
                ProcessingLocation.recipient_id.in_(recipient_ids),
                ProcessingLocation.organization_id == organization_id,
                ProcessingLocation.is_active.is_(True),
            )
            .order_by(ProcessingLocation.created_at, ProcessingLocation.id)
        )
        return list(self._session.scalars(stmt).unique().all())

    def list_by_country(
        self,
        organization_id: int,
        country_id: int,
        is_active: bool | None = None,
    ) -> list[ProcessingLocation]:
        """List locations of a tenant in one country.

        Args:
            organization_id: Owning tenant.
            country_id: Destination country.
            is_active: Optional active-flag filter.

        Returns:
            Locations ordered by recipient name.
        """
        stmt = (
            select(ProcessingLocation)
            .join(Recipient, Recipient.id == ProcessingLocation.recipient_id)
            .where(
                ProcessingLocation.organization_id == organization_id,
                ProcessingLocation.country_id == country_id,
            )
        )
        if is_active is not None:
            stmt = stmt.where(ProcessingLocation.is_active.is_(is_active))
        stmt = stmt.order_by(Recipient.name, ProcessingLocation.id)
        return list(self._session.scalars(stmt).unique().all())

    def deactivate_if_active(self, location: ProcessingLocation) -> bool:
        """Flip is_active to False only if the row is still active.

        The check runs in the UPDATE itself, so two concurrent callers
        cannot both succeed.

        Args:
            location: Loaded location; its is_active attribute is expired.

        Returns:
            True if exactly one row changed.
        """
        stmt = (
            update(ProcessingLocation)
            .where(
                ProcessingLocation.id == location.id,
                ProcessingLocation.is_active.is_(True),
            )
            .values(is_active=False)
            .execution_options(synchronize_session=False)
        )
        result = self._session.execute(stmt)
        self._session.expire(location, ["is_active", "updated_at"])
        return result.rowcount == 1
