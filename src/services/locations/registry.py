"""Processing location registry.

Creates, patches, deactivates and moves processing locations.
Every persisting write passes the transfer mechanism gate first,
so a failed validation never leaves a row behind.

All methods flush inside the caller's session. Commit and
rollback belong to ``DatabaseConnection.session()``:

    db = get_database()
    with db.session(isolation_level=settings.transfers.move_isolation_level) as session:
        registry = ProcessingLocationRegistry(session)
        successor = registry.move(location_id, LocationUpdate(country_id=us.id), org_id)
"""

from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.orm import Session

from src.database.models import Country, ProcessingLocation, Recipient, TransferMechanism
from src.database.repositories import (
    CountryRepository,
    OrganizationRepository,
    ProcessingLocationRepository,
    PurposeRepository,
    RecipientRepository,
    TransferMechanismRepository,
)
from src.services.errors import (
    CountryNotFoundError,
    LocationInactiveError,
    LocationNotFoundError,
    MechanismNotFoundError,
    OrganizationNotFoundError,
    PurposeNotFoundError,
    PurposeRequiredError,
    RecipientNotFoundError,
    TransferValidationError,
)
from src.services.hierarchy import HierarchyTraversal
from src.services.jurisdiction import ensure_mechanism_requirement
from src.services.locations.schemas import LocationCreate, LocationUpdate
from src.utils.logger import setup_logger

logger = setup_logger("services.locations.registry")

# Columns that cannot be patched to NULL
_REQUIRED_FIELDS = frozenset({"service", "country_id", "location_role"})

# Schema field -> ORM attribute
_ATTRIBUTE_NAMES = {"metadata": "location_metadata"}


@dataclass
class RecipientLocations:
    """Active locations of one node in an ancestor chain.

    Attributes:
        recipient: Chain node.
        depth: 0 for the queried recipient, 1 for its parent, ...
        locations: Active locations of the node.
    """

    recipient: Recipient
    depth: int
    locations: list[ProcessingLocation] = field(default_factory=list)


class ProcessingLocationRegistry:
    """Write gate and read accessors for processing locations."""

    def __init__(self, session: Session, traversal: HierarchyTraversal | None = None) -> None:
        """Initialize registry.

        Args:
            session: SQLAlchemy session instance.
            traversal: Hierarchy traversal; built from the session if omitted.
        """
        self._session = session
        self._locations = ProcessingLocationRepository(session)
        self._recipients = RecipientRepository(session)
        self._countries = CountryRepository(session)
        self._mechanisms = TransferMechanismRepository(session)
        self._purposes = PurposeRepository(session)
        self._organizations = OrganizationRepository(session)
        self._traversal = traversal or HierarchyTraversal(session)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def create(
        self,
        data: LocationCreate,
        origin_country: Country | None = None,
    ) -> ProcessingLocation:
        """Register a new active location.

        Args:
            data: Location fields.
            origin_country: Controller's home country. Resolved from the
                organization when omitted; without one the gate is skipped.

        Returns:
            Persisted location.

        Raises:
            RecipientNotFoundError: Recipient absent or owned elsewhere.
            CountryNotFoundError: Unknown destination country.
            MechanismNotFoundError: Unknown transfer mechanism.
            PurposeNotFoundError: Purpose absent or owned elsewhere.
            PurposeRequiredError: Neither purpose_id nor purpose_text given.
            TransferValidationError: Required safeguard missing.
        """
        recipient = self._recipients.get_for_organization(data.recipient_id, data.organization_id)
        if recipient is None:
            raise RecipientNotFoundError(data.recipient_id)

        country = self._resolve_country(data.country_id)
        mechanism = self._resolve_mechanism(data.transfer_mechanism_id)
        self._check_purpose(data.purpose_id, data.organization_id)
        self._ensure_purpose_present(data.purpose_id, data.purpose_text)

        origin = self._resolve_origin(data.organization_id, origin_country)
        self._ensure_transfer_allowed(origin, country, mechanism)

        location = self._locations.create(
            ProcessingLocation(
                organization_id=data.organization_id,
                recipient_id=recipient.id,
                service=data.service,
                country=country,
                location_role=data.location_role,
                purpose_id=data.purpose_id,
                purpose_text=data.purpose_text,
                transfer_mechanism=mechanism,
                location_metadata=data.metadata,
                is_active=True,
            )
        )
        logger.info(
            f"Created location {location.id} for recipient {recipient.id} in {country.iso_code}"
        )
        return location

    def update(
        self,
        location_id: int,
        changes: LocationUpdate,
        organization_id: int,
        origin_country: Country | None = None,
    ) -> ProcessingLocation:
        """Patch a location in place.

        The transfer gate runs again when the destination changes, or
        when the mechanism is cleared.

        Args:
            location_id: Location to patch.
            changes: Fields to change; unset fields are kept.
            organization_id: Owning tenant.
            origin_country: Controller's home country override.

        Returns:
            Updated location.

        Raises:
            LocationNotFoundError: Location absent or owned elsewhere.
            TransferValidationError: Patched destination needs a safeguard.
        """
        location = self._locations.get_for_organization(location_id, organization_id)
        if location is None:
            raise LocationNotFoundError(location_id)

        fields = changes.changes()

        if fields.get("purpose_id") is not None:
            self._check_purpose(fields["purpose_id"], organization_id)
        self._ensure_purpose_present(
            fields.get("purpose_id", location.purpose_id),
            fields.get("purpose_text", location.purpose_text),
        )

        mechanism = location.transfer_mechanism
        mechanism_cleared = False
        if "transfer_mechanism_id" in fields:
            mechanism = self._resolve_mechanism(fields["transfer_mechanism_id"])
            mechanism_cleared = mechanism is None and location.transfer_mechanism_id is not None

        destination = location.country
        country_changed = changes.changes_country(location.country_id)
        if country_changed:
            destination = self._resolve_country(fields["country_id"])

        if country_changed or mechanism_cleared:
            origin = self._resolve_origin(organization_id, origin_country)
            self._ensure_transfer_allowed(origin, destination, mechanism)

        self._apply(location, fields)
        location.country = destination
        location.transfer_mechanism = mechanism

        self._session.flush()
        self._session.refresh(location)
        logger.info(f"Updated location {location_id}: {sorted(fields)}")
        return location

    def deactivate(self, location_id: int, organization_id: int) -> ProcessingLocation:
        """Mark a location inactive. Calling it again is a no-op.

        Args:
            location_id: Location to deactivate.
            organization_id: Owning tenant.

        Returns:
            Inactive location.

        Raises:
            LocationNotFoundError: Location absent or owned elsewhere.
        """
        location = self._locations.get_for_organization(location_id, organization_id)
        if location is None:
            raise LocationNotFoundError(location_id)

        if not location.is_active:
            logger.debug(f"Location {location_id} already inactive")
            return location

        location.is_active = False
        self._session.flush()
        logger.info(f"Deactivated location {location_id}")
        return location

    def move(
        self,
        location_id: int,
        updates: LocationUpdate,
        organization_id: int,
        origin_country: Country | None = None,
    ) -> ProcessingLocation:
        """Replace a location by an active successor with merged fields.

        The original is locked, validated against, deactivated and
        linked from the successor within the caller's transaction.
        Any error leaves both rows untouched once the session rolls back.

        Args:
            location_id: Location to move.
            updates: Fields overriding the original's values.
            organization_id: Owning tenant.
            origin_country: Controller's home country override.

        Returns:
            The new active location.

        Raises:
            LocationNotFoundError: Location absent or owned elsewhere.
            LocationInactiveError: Original already inactive or moved concurrently.
            TransferValidationError: Merged destination needs a safeguard.
        """
        original = self._locations.get_for_update(location_id, organization_id)
        if original is None:
            raise LocationNotFoundError(location_id)
        if not original.is_active:
            raise LocationInactiveError(f"Location {location_id} is inactive and cannot be moved")

        fields = updates.changes()
        merged: dict[str, Any] = {
            "service": original.service,
            "country_id": original.country_id,
            "location_role": original.location_role,
            "purpose_id": original.purpose_id,
            "purpose_text": original.purpose_text,
            "transfer_mechanism_id": original.transfer_mechanism_id,
            "metadata": original.location_metadata,
        }
        merged.update(
            {
                name: value
                for name, value in fields.items()
                if value is not None or name not in _REQUIRED_FIELDS
            }
        )

        country = self._resolve_country(merged["country_id"])
        mechanism = self._resolve_mechanism(merged["transfer_mechanism_id"])
        if fields.get("purpose_id") is not None:
            self._check_purpose(fields["purpose_id"], organization_id)
        self._ensure_purpose_present(merged["purpose_id"], merged["purpose_text"])

        origin = self._resolve_origin(organization_id, origin_country)
        self._ensure_transfer_allowed(origin, country, mechanism)

        if not self._locations.deactivate_if_active(original):
            raise LocationInactiveError(
                f"Location {location_id} was deactivated by a concurrent operation"
            )

        successor = self._locations.create(
            ProcessingLocation(
                organization_id=organization_id,
                recipient_id=original.recipient_id,
                service=merged["service"],
                country=country,
                location_role=merged["location_role"],
                purpose_id=merged["purpose_id"],
                purpose_text=merged["purpose_text"],
                transfer_mechanism=mechanism,
                location_metadata=merged["metadata"],
                is_active=True,
                previous_location_id=original.id,
            )
        )
        logger.info(f"Moved location {location_id} to {successor.id} ({country.iso_code})")
        return successor

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def active_locations_for(
        self,
        recipient_id: int,
        organization_id: int,
    ) -> list[ProcessingLocation]:
        """List active locations of a recipient."""
        return self._locations.list_for_recipient(recipient_id, organization_id, is_active=True)

    def all_locations_for(
        self,
        recipient_id: int,
        organization_id: int,
        is_active: bool | None = None,
    ) -> list[ProcessingLocation]:
        """List a recipient's locations, newest first, including history."""
        return self._locations.list_for_recipient(
            recipient_id,
            organization_id,
            is_active=is_active,
            newest_first=True,
        )

    def locations_by_country(
        self,
        organization_id: int,
        country_id: int,
        is_active: bool | None = None,
    ) -> list[ProcessingLocation]:
        """List a tenant's locations in one country."""
        return self._locations.list_by_country(organization_id, country_id, is_active=is_active)

    def locations_with_ancestor_chain(
        self,
        recipient_id: int,
        organization_id: int,
    ) -> list[RecipientLocations]:
        """Group active locations of a recipient and its ancestors.

        Args:
            recipient_id: Starting recipient.
            organization_id: Owning tenant.

        Returns:
            One entry per node holding active locations, recipient
            first (depth 0) then ancestors by increasing depth.

        Raises:
            RecipientNotFoundError: Recipient absent or owned elsewhere.
        """
        recipient = self._recipients.get_for_organization(recipient_id, organization_id)
        if recipient is None:
            raise RecipientNotFoundError(recipient_id)

        chain = [recipient, *self._traversal.ancestor_chain(recipient_id, organization_id)]
        locations = self._locations.list_active_for_recipients(
            [node.id for node in chain],
            organization_id,
        )

        by_recipient: dict[int, list[ProcessingLocation]] = {}
        for location in locations:
            by_recipient.setdefault(location.recipient_id, []).append(location)

        return [
            RecipientLocations(recipient=node, depth=depth, locations=by_recipient[node.id])
            for depth, node in enumerate(chain)
            if node.id in by_recipient
        ]

    def lineage(self, location_id: int, organization_id: int) -> list[ProcessingLocation]:
        """Follow predecessor links back to the first record.

        Args:
            location_id: Most recent record of interest.
            organization_id: Owning tenant.

        Returns:
            Records oldest first, ending with ``location_id`` itself.

        Raises:
            LocationNotFoundError: Location absent or owned elsewhere.
        """
        location = self._locations.get_for_organization(location_id, organization_id)
        if location is None:
            raise LocationNotFoundError(location_id)

        chain = [location]
        seen = {location.id}
        while location.previous_location_id is not None:
            previous = self._locations.get_for_organization(
                location.previous_location_id,
                organization_id,
            )
            if previous is None or previous.id in seen:
                break
            chain.append(previous)
            seen.add(previous.id)
            location = previous

        chain.reverse()
        return chain

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _resolve_country(self, country_id: int) -> Country:
        country = self._countries.get_by_id(country_id)
        if country is None:
            raise CountryNotFoundError(country_id)
        return country

    def _resolve_mechanism(self, mechanism_id: int | None) -> TransferMechanism | None:
        if mechanism_id is None:
            return None
        mechanism = self._mechanisms.get_by_id(mechanism_id)
        if mechanism is None:
            raise MechanismNotFoundError(mechanism_id)
        return mechanism

    def _check_purpose(self, purpose_id: int | None, organization_id: int) -> None:
        if purpose_id is None:
            return
        if self._purposes.get_for_organization(purpose_id, organization_id) is None:
            raise PurposeNotFoundError(purpose_id)

    @staticmethod
    def _ensure_purpose_present(purpose_id: int | None, purpose_text: str | None) -> None:
        if purpose_id is None and not purpose_text:
            raise PurposeRequiredError("Either purpose_id or purpose_text must be provided")

    def _resolve_origin(
        self,
        organization_id: int,
        origin_country: Country | None,
    ) -> Country | None:
        """Pick the explicit origin or fall back to the headquarters country."""
        if origin_country is not None:
            return origin_country

        organization = self._organizations.get_by_id(organization_id)
        if organization is None:
            raise OrganizationNotFoundError(organization_id)
        return self._organizations.get_home_country(organization)

    @staticmethod
    def _ensure_transfer_allowed(
        origin: Country | None,
        destination: Country,
        mechanism: TransferMechanism | None,
    ) -> None:
        if origin is None:
            logger.debug("No origin country, skipping transfer mechanism check")
            return
        try:
            ensure_mechanism_requirement(origin, destination, mechanism is not None)
        except TransferValidationError as e:
            logger.warning(f"Rejected location write: {e}")
            raise

    @staticmethod
    def _apply(location: ProcessingLocation, fields: dict[str, Any]) -> None:
        for name, value in fields.items():
            if value is None and name in _REQUIRED_FIELDS:
                continue
            setattr(location, _ATTRIBUTE_NAMES.get(name, name), value)
