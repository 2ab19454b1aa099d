"""Cross-border transfer aggregation.

Classifies every active location of a recipient, and of each of its
ancestors, against the organization's headquarters country. Only
locations whose risk is above NONE are reported.
"""

from collections import Counter
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from src.database.models import Country, Organization, ProcessingLocation, Recipient
from src.database.repositories import (
    OrganizationRepository,
    ProcessingActivityRepository,
    ProcessingLocationRepository,
    RecipientRepository,
)
from src.services.errors import (
    ActivityNotFoundError,
    HomeCountryMissingError,
    OrganizationNotFoundError,
)
from src.services.hierarchy import HierarchyTraversal
from src.services.jurisdiction import RiskLevel, TransferRisk, derive_transfer_risk
from src.utils.logger import setup_logger

logger = setup_logger("services.transfers.aggregator")


@dataclass(frozen=True)
class CrossBorderTransfer:
    """One location involving a transfer out of the home jurisdiction.

    Attributes:
        organization_country: Controller's home country.
        recipient: Recipient owning the location.
        location: Assessed processing location.
        risk: Risk assessment.
        depth: 0 for the recipient's own locations, n for its n-th ancestor.
    """

    organization_country: Country
    recipient: Recipient
    location: ProcessingLocation
    risk: TransferRisk
    depth: int = 0


@dataclass(frozen=True)
class CountryTally:
    """Number of transfer locations in one destination country."""

    country: Country
    location_count: int


@dataclass
class TransferSummary:
    """Statistics over an activity's transfers.

    Attributes:
        total_recipients: Recipients linked to the activity.
        recipients_with_transfers: Distinct location owners with a transfer.
        risk_distribution: Transfer count per risk level (all levels present).
        countries_involved: Destinations by descending location count.
    """

    total_recipients: int
    recipients_with_transfers: int
    risk_distribution: dict[RiskLevel, int] = field(default_factory=dict)
    countries_involved: list[CountryTally] = field(default_factory=list)


@dataclass
class ActivityTransferAnalysis:
    """Transfer report for one processing activity."""

    activity_id: int
    activity_name: str
    organization_country: Country
    transfers: list[CrossBorderTransfer]
    summary: TransferSummary


class TransferAggregator:
    """Builds transfer reports for organizations and activities."""

    def __init__(self, session: Session, traversal: HierarchyTraversal | None = None) -> None:
        """Initialize aggregator.

        Args:
            session: SQLAlchemy session instance.
            traversal: Hierarchy traversal; built from the session if omitted.
        """
        self._organizations = OrganizationRepository(session)
        self._recipients = RecipientRepository(session)
        self._activities = ProcessingActivityRepository(session)
        self._locations = ProcessingLocationRepository(session)
        self._traversal = traversal or HierarchyTraversal(session)

    def detect_transfers(self, organization_id: int) -> list[CrossBorderTransfer]:
        """Detect transfers across all active recipients of an organization.

        Without a headquarters country the result is empty.

        Args:
            organization_id: Owning tenant.

        Returns:
            Transfers grouped by recipient, own locations first.

        Raises:
            OrganizationNotFoundError: Unknown organization.
        """
        organization = self._get_organization(organization_id)
        home_country = self._organizations.get_home_country(organization)
        if home_country is None:
            logger.warning(
                f"Organization {organization_id} has no headquarters country; "
                "transfer detection skipped"
            )
            return []

        transfers: list[CrossBorderTransfer] = []
        for recipient in self._recipients.list_for_organization(organization_id, is_active=True):
            transfers.extend(self._transfers_for(recipient, home_country))

        logger.info(f"Detected {len(transfers)} transfers for organization {organization_id}")
        return transfers

    def analyze_activity(self, activity_id: int) -> ActivityTransferAnalysis:
        """Analyze transfers of the recipients linked to an activity.

        Args:
            activity_id: Processing activity.

        Returns:
            ActivityTransferAnalysis with summary statistics.

        Raises:
            ActivityNotFoundError: Unknown activity.
            OrganizationNotFoundError: Activity's organization missing.
            HomeCountryMissingError: No headquarters country set.
        """
        activity = self._activities.get_by_id(activity_id)
        if activity is None:
            raise ActivityNotFoundError(activity_id)

        organization = self._get_organization(activity.organization_id)
        home_country = self._organizations.get_home_country(organization)
        if home_country is None:
            raise HomeCountryMissingError(
                f"Organization {organization.id} has no headquarters country set. "
                "Set the headquarters country to enable cross-border transfer analysis."
            )

        recipients = self._activities.get_recipients(activity_id)
        transfers: list[CrossBorderTransfer] = []
        for recipient in recipients:
            transfers.extend(self._transfers_for(recipient, home_country))

        return ActivityTransferAnalysis(
            activity_id=activity.id,
            activity_name=activity.name,
            organization_country=home_country,
            transfers=transfers,
            summary=self._summarize(len(recipients), transfers),
        )

    def _get_organization(self, organization_id: int) -> Organization:
        organization = self._organizations.get_by_id(organization_id)
        if organization is None:
            raise OrganizationNotFoundError(organization_id)
        return organization

    def _transfers_for(
        self,
        recipient: Recipient,
        home_country: Country,
    ) -> list[CrossBorderTransfer]:
        """Assess a recipient's own locations and those of its ancestors."""
        chain = [recipient]
        if recipient.parent_recipient_id is not None:
            chain.extend(self._traversal.ancestor_chain(recipient.id, recipient.organization_id))

        transfers = []
        for depth, owner in enumerate(chain):
            for location in self._locations.list_for_recipient(
                owner.id,
                recipient.organization_id,
                is_active=True,
            ):
                risk = derive_transfer_risk(
                    home_country,
                    location.country,
                    location.transfer_mechanism,
                )
                if not risk.is_transfer:
                    continue
                transfers.append(
                    CrossBorderTransfer(
                        organization_country=home_country,
                        recipient=owner,
                        location=location,
                        risk=risk,
                        depth=depth,
                    )
                )
        return transfers

    @staticmethod
    def _summarize(total_recipients: int, transfers: list[CrossBorderTransfer]) -> TransferSummary:
        risk_distribution = dict.fromkeys(RiskLevel, 0)
        country_counts: Counter[int] = Counter()
        countries: dict[int, Country] = {}

        for transfer in transfers:
            risk_distribution[transfer.risk.level] += 1
            country = transfer.location.country
            country_counts[country.id] += 1
            countries[country.id] = country

        return TransferSummary(
            total_recipients=total_recipients,
            recipients_with_transfers=len({transfer.recipient.id for transfer in transfers}),
            risk_distribution=risk_distribution,
            countries_involved=[
                CountryTally(country=countries[country_id], location_count=count)
                for country_id, count in country_counts.most_common()
            ],
        )
