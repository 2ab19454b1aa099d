"""Recipient model for the hierarchy store.

The parent link is a plain lookup key: there is no ORM
relationship, so traversal always goes through keyed queries
scoped to the owning organization.
"""

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.database.models.base import Base, TenantMixin, TimestampMixin
from src.database.models.enums import RecipientType, check_in


class Recipient(Base, TenantMixin, TimestampMixin):
    """Entity receiving personal data from the controller.

    Attributes:
        id: Primary key.
        organization_id: Owning tenant.
        name: Display name.
        type: One of RecipientType.
        parent_recipient_id: Parent in the processor or department chain.
        is_active: Whether the recipient is currently in use.
    """

    __tablename__ = "recipients"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(30), nullable=False)
    parent_recipient_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("recipients.id", ondelete="SET NULL"),
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    __table_args__ = (
        CheckConstraint(check_in("type", RecipientType), name="chk_recipient_type"),
        Index("idx_recipients_org_parent", "organization_id", "parent_recipient_id"),
        Index("idx_recipients_org_type", "organization_id", "type"),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<Recipient(id={self.id}, name='{self.name}', type='{self.type}', "
            f"parent={self.parent_recipient_id})>"
        )
