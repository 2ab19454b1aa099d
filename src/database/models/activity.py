"""Processing activity and its recipient links."""

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.database.models.base import Base, TenantMixin, TimestampMixin


class ProcessingActivity(Base, TenantMixin, TimestampMixin):
    """Record of processing activity (GDPR Article 30 entry).

    Attributes:
        id: Primary key.
        organization_id: Owning tenant.
        name: Activity name.
    """

    __tablename__ = "processing_activities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    __table_args__ = (Index("idx_activities_org", "organization_id"),)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<ProcessingActivity(id={self.id}, name='{self.name}')>"


# =============================================================================
# ASSOCIATION TABLES
# =============================================================================


class ActivityRecipient(Base):
    """Association table for Activity-Recipient many-to-many relationship."""

    __tablename__ = "activity_recipients"

    activity_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("processing_activities.id", ondelete="CASCADE"),
        primary_key=True,
    )
    recipient_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("recipients.id", ondelete="CASCADE"),
        primary_key=True,
    )
