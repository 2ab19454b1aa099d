"""Closed value sets shared by models and services.

Values are stored as plain strings and guarded by
CHECK constraints on the owning tables.
"""

from enum import StrEnum


class RecipientType(StrEnum):
    """Role a recipient plays towards the controller."""

    PROCESSOR = "PROCESSOR"
    SUB_PROCESSOR = "SUB_PROCESSOR"
    JOINT_CONTROLLER = "JOINT_CONTROLLER"
    SERVICE_PROVIDER = "SERVICE_PROVIDER"
    SEPARATE_CONTROLLER = "SEPARATE_CONTROLLER"
    PUBLIC_AUTHORITY = "PUBLIC_AUTHORITY"
    INTERNAL_DEPARTMENT = "INTERNAL_DEPARTMENT"


class LocationRole(StrEnum):
    """What a recipient does with data at a processing location."""

    HOSTING = "HOSTING"
    PROCESSING = "PROCESSING"
    BOTH = "BOTH"


class JurisdictionTag(StrEnum):
    """GDPR status of a country.

    Values match the strings stored in ``countries.gdpr_status``.
    """

    EU = "EU"
    EEA = "EEA"
    ADEQUATE = "Adequate"
    THIRD_COUNTRY = "Third Country"


class MechanismCategory(StrEnum):
    """Transfer mechanism family (GDPR Chapter V)."""

    ADEQUACY = "ADEQUACY"
    SAFEGUARD = "SAFEGUARD"
    DEROGATION = "DEROGATION"


def check_in(column: str, values: type[StrEnum]) -> str:
    """Build a CHECK constraint expression restricting a column to enum values.

    Args:
        column: Column name.
        values: Enum class whose values are allowed.

    Returns:
        SQL expression string.
    """
    allowed = ", ".join(f"'{member.value}'" for member in values)
    return f"{column} IN ({allowed})"
