"""Processing location registry and its input schemas."""

from src.services.locations.registry import ProcessingLocationRegistry, RecipientLocations
from src.services.locations.schemas import LocationCreate, LocationUpdate

__all__ = [
    "ProcessingLocationRegistry",
    "RecipientLocations",
    "LocationCreate",
    "LocationUpdate",
]
