"""Transfer risk engine.

Maps (origin, destination, mechanism) to a risk level and
provides the write-time gate used by the location registry.

Decision order (first match wins):
    1. same jurisdiction             -> NONE
    2. destination adequate          -> LOW
    3. safeguard required            -> MEDIUM with mechanism, else CRITICAL
    4. destination is third country  -> MEDIUM with mechanism, else HIGH
    5. otherwise                     -> NONE
"""

from dataclasses import dataclass
from enum import StrEnum

from src.database.models import TransferMechanism
from src.services.errors import TransferValidationError
from src.services.jurisdiction.classifier import (
    HasJurisdiction,
    is_adequate,
    is_third_country,
    requires_safeguard,
    same_jurisdiction,
)

# =============================================================================
# CONSTANTS
# =============================================================================

SAFEGUARD_LEGAL_BASIS = "GDPR Article 46"
"""Article requiring appropriate safeguards for third-country transfers."""

DEFAULT_REQUIRED_MECHANISM = "Standard Contractual Clauses or equivalent"
"""Hint returned with HIGH risk assessments."""


class RiskLevel(StrEnum):
    """Compliance exposure of a processing location."""

    NONE = "NONE"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class RiskReason(StrEnum):
    """Why a risk level was assigned."""

    SAME_JURISDICTION = "SAME_JURISDICTION"
    ADEQUACY_DECISION = "ADEQUACY_DECISION"
    SAFEGUARDS_IN_PLACE = "SAFEGUARDS_IN_PLACE"
    MISSING_SAFEGUARDS = "MISSING_SAFEGUARDS"
    THIRD_COUNTRY_NO_MECHANISM = "THIRD_COUNTRY_NO_MECHANISM"


@dataclass(frozen=True)
class TransferRisk:
    """Risk assessment for one location.

    Attributes:
        level: Risk level.
        reason: Rule that produced the level.
        mechanism: Safeguard on file (MEDIUM only).
        required_mechanism: What would lower the risk (HIGH only).
    """

    level: RiskLevel
    reason: RiskReason
    mechanism: TransferMechanism | None = None
    required_mechanism: str | None = None

    @property
    def is_transfer(self) -> bool:
        """Whether the assessment denotes a cross-border transfer."""
        return self.level is not RiskLevel.NONE


@dataclass(frozen=True)
class MechanismValidation:
    """Outcome of the mechanism requirement gate.

    Attributes:
        valid: False if the write must be rejected.
        required: Whether a mechanism is mandatory for this transfer.
        error: Human-readable reason when invalid.
    """

    valid: bool
    required: bool
    error: str | None = None


# =============================================================================
# CLASSIFICATION
# =============================================================================


def classify(
    origin: HasJurisdiction,
    destination: HasJurisdiction,
    mechanism_present: bool,
) -> RiskLevel:
    """Classify a transfer from origin to destination.

    Args:
        origin: Controller's home country.
        destination: Processing location country.
        mechanism_present: Whether a transfer mechanism is attached.

    Returns:
        Risk level.
    """
    if same_jurisdiction(origin, destination):
        return RiskLevel.NONE
    if is_adequate(destination):
        return RiskLevel.LOW
    if requires_safeguard(origin, destination):
        return RiskLevel.MEDIUM if mechanism_present else RiskLevel.CRITICAL
    if is_third_country(destination):
        return RiskLevel.MEDIUM if mechanism_present else RiskLevel.HIGH
    return RiskLevel.NONE


def derive_transfer_risk(
    origin: HasJurisdiction,
    destination: HasJurisdiction,
    mechanism: TransferMechanism | None,
) -> TransferRisk:
    """Assess a transfer with its reason and supporting mechanism.

    Args:
        origin: Controller's home country.
        destination: Processing location country.
        mechanism: Attached transfer mechanism, if any.

    Returns:
        TransferRisk consistent with ``classify``.
    """
    level = classify(origin, destination, mechanism is not None)

    if level is RiskLevel.LOW:
        return TransferRisk(level, RiskReason.ADEQUACY_DECISION)
    if level is RiskLevel.MEDIUM:
        return TransferRisk(level, RiskReason.SAFEGUARDS_IN_PLACE, mechanism=mechanism)
    if level is RiskLevel.HIGH:
        return TransferRisk(
            level,
            RiskReason.MISSING_SAFEGUARDS,
            required_mechanism=DEFAULT_REQUIRED_MECHANISM,
        )
    if level is RiskLevel.CRITICAL:
        return TransferRisk(level, RiskReason.THIRD_COUNTRY_NO_MECHANISM)
    return TransferRisk(level, RiskReason.SAME_JURISDICTION)


# =============================================================================
# WRITE-TIME GATE
# =============================================================================


def validate_mechanism_requirement(
    origin: HasJurisdiction,
    destination: HasJurisdiction,
    mechanism_present: bool,
    destination_name: str | None = None,
) -> MechanismValidation:
    """Check whether a location may be stored with its mechanism.

    Args:
        origin: Controller's home country.
        destination: Processing location country.
        mechanism_present: Whether a transfer mechanism is attached.
        destination_name: Name used in the error message; defaults to
            ``destination.name`` when available.

    Returns:
        MechanismValidation; invalid only for a required but missing safeguard.
    """
    if same_jurisdiction(origin, destination):
        return MechanismValidation(valid=True, required=False)

    if not requires_safeguard(origin, destination):
        return MechanismValidation(valid=True, required=False)

    if mechanism_present:
        return MechanismValidation(valid=True, required=True)

    name = destination_name or getattr(destination, "name", "Destination")
    return MechanismValidation(
        valid=False,
        required=True,
        error=(
            f"Transfer mechanism required: {name} is a third country without "
            f"adequacy decision. Select an appropriate safeguard under "
            f"{SAFEGUARD_LEGAL_BASIS} (e.g., Standard Contractual Clauses)."
        ),
    )


def ensure_mechanism_requirement(
    origin: HasJurisdiction,
    destination: HasJurisdiction,
    mechanism_present: bool,
) -> MechanismValidation:
    """Raising form of ``validate_mechanism_requirement``.

    Raises:
        TransferValidationError: If a required safeguard is missing.
    """
    validation = validate_mechanism_requirement(origin, destination, mechanism_present)
    if not validation.valid:
        raise TransferValidationError(
            validation.error or "Transfer mechanism required",
            destination=getattr(destination, "name", "Destination"),
            legal_basis=SAFEGUARD_LEGAL_BASIS,
        )
    return validation
