"""Recipient repository (hierarchy store).

Pure data access over the recipient table. Every query is
scoped to one organization; traversal logic lives in
``src.services.hierarchy``.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.database.models import Recipient, RecipientType
from src.database.repositories.base import BaseRepository


class RecipientRepository(BaseRepository[Recipient]):
    """Repository for Recipient entity operations."""

    model = Recipient

    def __init__(self, session: Session) -> None:
        """Initialize recipient repository.

        Args:
            session: SQLAlchemy session instance.
        """
        super().__init__(session)

    def get_direct_children(self, recipient_id: int, organization_id: int) -> list[Recipient]:
        """Get immediate children of a recipient.

        Args:
            recipient_id: Parent recipient.
            organization_id: Owning tenant.

        Returns:
            Children ordered by creation time.
        """
        stmt = (
            select(Recipient)
            .where(
                Recipient.parent_recipient_id == recipient_id,
                Recipient.organization_id == organization_id,
            )
            .order_by(Recipient.created_at, Recipient.id)
        )
        return list(self._session.scalars(stmt).all())

    def get_children_of(self, parent_ids: list[int], organization_id: int) -> list[Recipient]:
        """Get children of several parents in one query.

        Args:
            parent_ids: Parent recipient IDs.
            organization_id: Owning tenant.

        Returns:
            Children ordered by creation time.
        """
        if not parent_ids:
            return []
        stmt = (
            select(Recipient)
            .where(
                Recipient.parent_recipient_id.in_(parent_ids),
                Recipient.organization_id == organization_id,
            )
            .order_by(Recipient.created_at, Recipient.id)
        )
        return list(self._session.scalars(stmt).all())

    def list_for_organization(
        self,
        organization_id: int,
        is_active: bool | None = None,
    ) -> list[Recipient]:
        """List recipients of an organization.

        Args:
            organization_id: Owning tenant.
            is_active: Optional active-flag filter.

        Returns:
            Recipients ordered by name.
        """
        stmt = select(Recipient).where(Recipient.organization_id == organization_id)
        if is_active is not None:
            stmt = stmt.where(Recipient.is_active.is_(is_active))
        stmt = stmt.order_by(Recipient.name, Recipient.id)
        return list(self._session.scalars(stmt).all())

    def find_orphaned_sub_processors(self, organization_id: int) -> list[Recipient]:
        """Find sub-processors with no parent set.

        Args:
            organization_id: Owning tenant.

        Returns:
            Orphaned sub-processors.
        """
        stmt = (
            select(Recipient)
            .where(
                Recipient.organization_id == organization_id,
                Recipient.type == RecipientType.SUB_PROCESSOR,
                Recipient.parent_recipient_id.is_(None),
            )
            .order_by(Recipient.created_at.desc(), Recipient.id.desc())
        )
        return list(self._session.scalars(stmt).all())

    def list_with_parent(self, organization_id: int) -> list[Recipient]:
        """List recipients that have a parent reference.

        Args:
            organization_id: Owning tenant.

        Returns:
            Child recipients.
        """
        stmt = select(Recipient).where(
            Recipient.organization_id == organization_id,
            Recipient.parent_recipient_id.is_not(None),
        )
        return list(self._session.scalars(stmt).all())

    def set_parent(self, recipient: Recipient, parent_recipient_id: int | None) -> Recipient:
        """Write a parent reference. Callers must validate first.

        Args:
            recipient: Recipient to re-parent.
            parent_recipient_id: New parent or None to detach.

        Returns:
            Updated recipient.
        """
        recipient.parent_recipient_id = parent_recipient_id
        self._session.flush()
        return recipient
