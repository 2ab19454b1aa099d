"""Jurisdiction classifier.

Pure functions comparing the GDPR status of two countries.
"""

from typing import Protocol

from src.database.models.enums import JurisdictionTag

EU_EEA_TAGS = frozenset({JurisdictionTag.EU, JurisdictionTag.EEA})
PROTECTED_TAGS = EU_EEA_TAGS | {JurisdictionTag.ADEQUATE}


class HasJurisdiction(Protocol):
    """Anything exposing a set of jurisdiction tags (e.g. Country)."""

    @property
    def jurisdiction_tags(self) -> frozenset[JurisdictionTag]: ...


def is_eu_eea(country: HasJurisdiction) -> bool:
    """Whether the country carries the EU or EEA tag."""
    return bool(country.jurisdiction_tags & EU_EEA_TAGS)


def is_adequate(country: HasJurisdiction) -> bool:
    """Whether the country benefits from an adequacy decision."""
    return JurisdictionTag.ADEQUATE in country.jurisdiction_tags


def same_jurisdiction(first: HasJurisdiction, second: HasJurisdiction) -> bool:
    """Check if two countries share a legal framework.

    Both EU/EEA, or both covered by an adequacy decision.

    Args:
        first: First country.
        second: Second country.

    Returns:
        True if no cross-border transfer occurs between them.
    """
    if is_eu_eea(first) and is_eu_eea(second):
        return True
    return is_adequate(first) and is_adequate(second)


def is_third_country(country: HasJurisdiction) -> bool:
    """Check if a country is neither EU/EEA nor adequate."""
    return not country.jurisdiction_tags & PROTECTED_TAGS


def requires_safeguard(origin: HasJurisdiction, destination: HasJurisdiction) -> bool:
    """Check if a transfer needs an Article 46 safeguard.

    Only EU/EEA origins towards third countries do.

    Args:
        origin: Controller's home country.
        destination: Processing location country.

    Returns:
        True if a transfer mechanism is mandatory.
    """
    return is_eu_eea(origin) and is_third_country(destination)
