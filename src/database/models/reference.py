"""Reference data models: countries, transfer mechanisms, purposes.

Countries and mechanisms are read-only lookup tables maintained
outside this package. Purposes are tenant-scoped.
"""

from sqlalchemy import JSON, CheckConstraint, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.database.models.base import Base, TenantMixin, TimestampMixin
from src.database.models.enums import JurisdictionTag, MechanismCategory, check_in


class Country(Base):
    """Country with its GDPR jurisdiction status.

    Attributes:
        id: Primary key.
        iso_code: ISO 3166-1 alpha-2 code.
        name: Country name.
        gdpr_status: Raw list of status tags (e.g. ["EU", "EEA"]).
    """

    __tablename__ = "countries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    iso_code: Mapped[str] = mapped_column(String(2), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    gdpr_status: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    @property
    def jurisdiction_tags(self) -> frozenset[JurisdictionTag]:
        """Known jurisdiction tags carried by this country.

        Unknown strings in ``gdpr_status`` are ignored.
        """
        known = {tag.value for tag in JurisdictionTag}
        return frozenset(
            JurisdictionTag(status) for status in self.gdpr_status or [] if status in known
        )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<Country(id={self.id}, iso='{self.iso_code}', status={self.gdpr_status})>"


class TransferMechanism(Base):
    """Documented safeguard permitting a cross-border transfer.

    Attributes:
        id: Primary key.
        code: Short unique code (SCC, BCR, ...).
        name: Display name.
        category: ADEQUACY, SAFEGUARD or DEROGATION.
        gdpr_article: Legal reference (e.g. "Art. 46(2)(c)").
    """

    __tablename__ = "transfer_mechanisms"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(String(20), nullable=False)
    gdpr_article: Mapped[str | None] = mapped_column(String(50))

    __table_args__ = (
        CheckConstraint(check_in("category", MechanismCategory), name="chk_mechanism_category"),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<TransferMechanism(id={self.id}, code='{self.code}')>"


class Purpose(Base, TenantMixin, TimestampMixin):
    """Processing purpose owned by a tenant."""

    __tablename__ = "purposes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)

    __table_args__ = (Index("idx_purposes_org", "organization_id"),)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<Purpose(id={self.id}, name='{self.name}')>"
