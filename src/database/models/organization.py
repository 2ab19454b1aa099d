"""Organization (tenant) model.

Owned by the surrounding system; this package only reads
the designated headquarters country.
"""

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.database.models.base import Base, TimestampMixin


class Organization(Base, TimestampMixin):
    """Tenant acting as data controller.

    Attributes:
        id: Primary key.
        name: Organization name.
        slug: Unique URL-safe identifier.
        headquarters_country_id: Home jurisdiction used as transfer origin.
    """

    __tablename__ = "organizations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    headquarters_country_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("countries.id", ondelete="SET NULL"),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<Organization(id={self.id}, slug='{self.slug}')>"
