"""Pydantic schemas for processing location writes."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.database.models import LocationRole


class LocationCreate(BaseModel):
    """Input for registering a new processing location."""

    model_config = ConfigDict(use_enum_values=True)

    organization_id: int
    recipient_id: int
    service: str = Field(min_length=1)
    country_id: int
    location_role: LocationRole
    purpose_id: int | None = None
    purpose_text: str | None = None
    transfer_mechanism_id: int | None = None
    metadata: dict[str, Any] | None = None


class LocationUpdate(BaseModel):
    """Partial update of a processing location.

    Only fields explicitly set are applied, so passing
    ``transfer_mechanism_id=None`` clears the mechanism while
    omitting it keeps the current one. Tenant and recipient
    links are not patchable.
    """

    model_config = ConfigDict(use_enum_values=True)

    service: str | None = Field(default=None, min_length=1)
    country_id: int | None = None
    location_role: LocationRole | None = None
    purpose_id: int | None = None
    purpose_text: str | None = None
    transfer_mechanism_id: int | None = None
    metadata: dict[str, Any] | None = None

    def changes(self) -> dict[str, Any]:
        """Return only the fields the caller set."""
        return self.model_dump(include=self.model_fields_set)

    def changes_country(self, current_country_id: int) -> bool:
        """Check if the update targets a different destination."""
        return (
            "country_id" in self.model_fields_set
            and self.country_id is not None
            and self.country_id != current_country_id
        )
