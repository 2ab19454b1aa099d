"""Processing location model.

Declares where a recipient hosts or processes personal data.
Rows are never deleted by the registry: they are deactivated,
and a move links the successor to its predecessor.
"""

from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.database.models.base import Base, TenantMixin, TimestampMixin
from src.database.models.enums import LocationRole, check_in
from src.database.models.reference import Country, TransferMechanism


class ProcessingLocation(Base, TenantMixin, TimestampMixin):
    """Country/service where a recipient processes data.

    Attributes:
        id: Primary key.
        organization_id: Owning tenant (always equal to the recipient's).
        recipient_id: Owning recipient.
        service: Free-text description of the service.
        country_id: Destination country.
        location_role: HOSTING, PROCESSING or BOTH.
        purpose_id: Optional purpose reference.
        purpose_text: Free-text purpose fallback.
        transfer_mechanism_id: Safeguard on file, if any.
        is_active: False once deactivated or moved.
        location_metadata: Arbitrary JSON details.
        previous_location_id: Predecessor record when created by a move.
    """

    __tablename__ = "processing_locations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    recipient_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("recipients.id", ondelete="CASCADE"),
        nullable=False,
    )

    service: Mapped[str] = mapped_column(Text, nullable=False)
    country_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("countries.id", ondelete="RESTRICT"),
        nullable=False,
    )
    location_role: Mapped[str] = mapped_column(String(20), nullable=False)

    # Purpose attribution
    purpose_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("purposes.id", ondelete="SET NULL"),
    )
    purpose_text: Mapped[str | None] = mapped_column(Text)

    transfer_mechanism_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("transfer_mechanisms.id", ondelete="SET NULL"),
    )

    # Status
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    location_metadata: Mapped[dict[str, Any] | None] = mapped_column("metadata", JSON)

    # Lineage
    previous_location_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("processing_locations.id", ondelete="SET NULL"),
        index=True,
    )

    country: Mapped[Country] = relationship(Country, lazy="joined")
    transfer_mechanism: Mapped[TransferMechanism | None] = relationship(
        TransferMechanism,
        lazy="joined",
    )

    __table_args__ = (
        CheckConstraint(check_in("location_role", LocationRole), name="chk_location_role"),
        CheckConstraint(
            "purpose_id IS NOT NULL OR purpose_text IS NOT NULL",
            name="chk_location_purpose",
        ),
        Index("idx_locations_org_recipient", "organization_id", "recipient_id"),
        Index("idx_locations_org_country", "organization_id", "country_id"),
        Index("idx_locations_org_mechanism", "organization_id", "transfer_mechanism_id"),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<ProcessingLocation(id={self.id}, recipient={self.recipient_id}, "
            f"country={self.country_id}, active={self.is_active})>"
        )
