"""Database repositories for the transfer registry.

Provides repository pattern implementations for all
database entities with CRUD and specialized queries.

Usage:
    from src.database.repositories import RecipientRepository
    from src.database import get_database

    db = get_database()
    with db.session() as session:
        repo = RecipientRepository(session)
        children = repo.get_direct_children(recipient_id, organization_id)
"""

from src.database.repositories.activity import ProcessingActivityRepository
from src.database.repositories.base import BaseRepository
from src.database.repositories.processing_location import ProcessingLocationRepository
from src.database.repositories.recipient import RecipientRepository
from src.database.repositories.reference import (
    CountryRepository,
    OrganizationRepository,
    PurposeRepository,
    TransferMechanismRepository,
)

__all__ = [
    # Base
    "BaseRepository",
    # Reference data
    "CountryRepository",
    "TransferMechanismRepository",
    "PurposeRepository",
    "OrganizationRepository",
    # Hierarchy
    "RecipientRepository",
    # Activities
    "ProcessingActivityRepository",
    # Locations
    "ProcessingLocationRepository",
]
