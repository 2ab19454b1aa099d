"""SQLAlchemy ORM models for the transfer registry.

This module exports all database models and the Base class
for use throughout the application.

Usage:
    from src.database.models import Base, Recipient, ProcessingLocation

Tables:
    - organizations: Tenants with their headquarters country
    - countries: Country reference data with GDPR status tags
    - transfer_mechanisms: Safeguard reference data (SCC, BCR, ...)
    - purposes: Tenant processing purposes
    - recipients: Recipient hierarchy (parent/sub-processor chains)
    - processing_activities: Article 30 activities
    - activity_recipients: Activity-Recipient association
    - processing_locations: Where recipients host or process data
"""

from src.database.models.activity import ActivityRecipient, ProcessingActivity
from src.database.models.base import Base, TenantMixin, TimestampMixin
from src.database.models.enums import (
    JurisdictionTag,
    LocationRole,
    MechanismCategory,
    RecipientType,
)
from src.database.models.organization import Organization
from src.database.models.processing_location import ProcessingLocation
from src.database.models.recipient import Recipient
from src.database.models.reference import Country, Purpose, TransferMechanism

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "TenantMixin",
    # Enums
    "RecipientType",
    "LocationRole",
    "JurisdictionTag",
    "MechanismCategory",
    # Tenant
    "Organization",
    # Reference data
    "Country",
    "TransferMechanism",
    "Purpose",
    # Hierarchy
    "Recipient",
    # Activities
    "ProcessingActivity",
    "ActivityRecipient",
    # Locations
    "ProcessingLocation",
]
