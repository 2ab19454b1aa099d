"""Exceptions raised by the hierarchy and transfer services.

Records owned by another organization raise the same
NotFound error as missing records.
"""


class TransferRegistryError(Exception):
    """Base exception for registry errors."""

    pass


# =============================================================================
# NOT FOUND
# =============================================================================


class NotFoundError(TransferRegistryError):
    """Raised when a record is absent or belongs to another tenant."""

    entity = "Record"

    def __init__(self, entity_id: int | None = None, message: str | None = None) -> None:
        """Build error with a uniform message.

        Args:
            entity_id: Identifier that could not be resolved.
            message: Optional override message.
        """
        self.entity_id = entity_id
        super().__init__(message or f"{self.entity} not found or does not belong to organization")


class RecipientNotFoundError(NotFoundError):
    """Raised when a recipient cannot be resolved."""

    entity = "Recipient"


class LocationNotFoundError(NotFoundError):
    """Raised when a processing location cannot be resolved."""

    entity = "Location"


class CountryNotFoundError(NotFoundError):
    """Raised when a country cannot be resolved."""

    entity = "Country"


class MechanismNotFoundError(NotFoundError):
    """Raised when a transfer mechanism cannot be resolved."""

    entity = "Transfer mechanism"


class PurposeNotFoundError(NotFoundError):
    """Raised when a purpose cannot be resolved."""

    entity = "Purpose"


class OrganizationNotFoundError(NotFoundError):
    """Raised when an organization cannot be resolved."""

    entity = "Organization"


class ActivityNotFoundError(NotFoundError):
    """Raised when a processing activity cannot be resolved."""

    entity = "Activity"


# =============================================================================
# VALIDATION
# =============================================================================


class ValidationFailedError(TransferRegistryError):
    """Raised when a write would break a registry invariant."""

    pass


class TransferValidationError(ValidationFailedError):
    """Raised when a transfer needs a safeguard and none is attached.

    Attributes:
        destination: Name of the destination country.
        legal_basis: Article requiring the safeguard.
    """

    def __init__(self, message: str, destination: str, legal_basis: str) -> None:
        """Store destination and legal basis next to the message."""
        self.destination = destination
        self.legal_basis = legal_basis
        super().__init__(message)


class PurposeRequiredError(ValidationFailedError):
    """Raised when neither a purpose reference nor purpose text is given."""

    pass


class LocationInactiveError(ValidationFailedError):
    """Raised when moving a location that is no longer active."""

    pass


class HierarchyRuleError(ValidationFailedError):
    """Raised when a parent assignment violates type rules."""

    pass


class CycleDetectedError(TransferRegistryError):
    """Raised when a parent assignment would create a loop."""

    pass


class DepthExceededError(TransferRegistryError):
    """Raised when a parent assignment would exceed the type depth ceiling.

    Attributes:
        depth: Depth the recipient would have.
        max_depth: Ceiling for the recipient type.
    """

    def __init__(self, depth: int, max_depth: int, recipient_type: str) -> None:
        """Build error from the offending depth values."""
        self.depth = depth
        self.max_depth = max_depth
        super().__init__(
            f"Setting this parent would result in depth {depth}, which exceeds "
            f"maximum depth of {max_depth} for type {recipient_type}"
        )


class HomeCountryMissingError(TransferRegistryError):
    """Raised when an organization has no headquarters country set."""

    pass
