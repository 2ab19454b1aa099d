"""Jurisdiction classification and transfer risk assessment."""

from src.services.jurisdiction.classifier import (
    is_third_country,
    requires_safeguard,
    same_jurisdiction,
)
from src.services.jurisdiction.risk import (
    MechanismValidation,
    RiskLevel,
    RiskReason,
    TransferRisk,
    classify,
    derive_transfer_risk,
    ensure_mechanism_requirement,
    validate_mechanism_requirement,
)

__all__ = [
    "same_jurisdiction",
    "is_third_country",
    "requires_safeguard",
    "RiskLevel",
    "RiskReason",
    "TransferRisk",
    "MechanismValidation",
    "classify",
    "derive_transfer_risk",
    "validate_mechanism_requirement",
    "ensure_mechanism_requirement",
]
