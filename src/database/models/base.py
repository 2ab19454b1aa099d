"""Declarative base and shared column mixins for registry models."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all registry models.

    Every table is registered on ``Base.metadata``, which
    ``DatabaseConnection.create_tables`` uses to build the schema.
    """

    pass


class TimestampMixin:
    """Adds created_at/updated_at, both filled by the database."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class TenantMixin:
    """Adds the owning organization to tenant-scoped tables.

    Rows are removed with their organization. Repositories rely on
    this column in ``BaseRepository.get_for_organization``.
    """

    organization_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
    )
