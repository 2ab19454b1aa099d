"""Reference data repositories.

Read-only lookups for countries, transfer mechanisms, purposes
and organizations.
"""

from src.database.models import Country, Organization, Purpose, TransferMechanism
from src.database.repositories.base import BaseRepository


class CountryRepository(BaseRepository[Country]):
    """Repository for Country lookups."""

    model = Country


class TransferMechanismRepository(BaseRepository[TransferMechanism]):
    """Repository for TransferMechanism lookups."""

    model = TransferMechanism


class PurposeRepository(BaseRepository[Purpose]):
    """Repository for tenant purposes."""

    model = Purpose


class OrganizationRepository(BaseRepository[Organization]):
    """Repository for tenant records."""

    model = Organization

    def get_home_country(self, organization: Organization) -> Country | None:
        """Resolve the organization's headquarters country.

        Args:
            organization: Tenant record.

        Returns:
            Country or None when no headquarters country is set.
        """
        if organization.headquarters_country_id is None:
            return None
        return self._session.get(Country, organization.headquarters_country_id)
