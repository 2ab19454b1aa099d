"""Database package for the transfer registry.

Provides database connection management, ORM models, and repositories.

Usage:
    from src.database import get_database, RecipientRepository

    db = get_database()
    with db.session() as session:
        repo = RecipientRepository(session)
        recipients = repo.list_for_organization(organization_id)
"""

from src.database.connection import (
    DatabaseConnection,
    close_database,
    get_database,
    get_session,
    init_database,
)
from src.database.models import (
    ActivityRecipient,
    Base,
    Country,
    JurisdictionTag,
    LocationRole,
    MechanismCategory,
    Organization,
    ProcessingActivity,
    ProcessingLocation,
    Purpose,
    Recipient,
    RecipientType,
    TransferMechanism,
)
from src.database.repositories import (
    BaseRepository,
    CountryRepository,
    OrganizationRepository,
    ProcessingActivityRepository,
    ProcessingLocationRepository,
    PurposeRepository,
    RecipientRepository,
    TransferMechanismRepository,
)

__all__ = [
    # Connection
    "DatabaseConnection",
    "get_database",
    "get_session",
    "init_database",
    "close_database",
    # Models
    "Base",
    "Organization",
    "Country",
    "TransferMechanism",
    "Purpose",
    "Recipient",
    "ProcessingActivity",
    "ActivityRecipient",
    "ProcessingLocation",
    # Enums
    "RecipientType",
    "LocationRole",
    "JurisdictionTag",
    "MechanismCategory",
    # Repositories
    "BaseRepository",
    "CountryRepository",
    "TransferMechanismRepository",
    "PurposeRepository",
    "OrganizationRepository",
    "RecipientRepository",
    "ProcessingActivityRepository",
    "ProcessingLocationRepository",
]
