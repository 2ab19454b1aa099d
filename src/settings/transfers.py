"""Recipient hierarchy and transfer registry settings.

Bounds for hierarchy traversal and the isolation level used
for atomic processing location moves.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

VALID_ISOLATION_LEVELS = {
    "SERIALIZABLE",
    "REPEATABLE READ",
    "READ COMMITTED",
}


class TransferSettings(BaseSettings):
    """Traversal bounds and move transaction configuration.

    Attributes:
        max_ancestor_iterations: Hard cap on upward parent hops.
        default_descendant_depth: Default depth for descendant trees.
        move_isolation_level: Transaction isolation used for moves.
    """

    max_ancestor_iterations: int = Field(
        default=15,
        ge=1,
        alias="HIERARCHY_MAX_ANCESTOR_ITERATIONS",
    )
    default_descendant_depth: int = Field(
        default=10,
        ge=1,
        alias="HIERARCHY_DEFAULT_DESCENDANT_DEPTH",
    )
    move_isolation_level: str = Field(
        default="SERIALIZABLE",
        alias="LOCATION_MOVE_ISOLATION_LEVEL",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("move_isolation_level")
    @classmethod
    def validate_isolation_level(cls, v: str) -> str:
        """Validate isolation level is one SQLAlchemy accepts."""
        v_upper = v.upper().replace("_", " ")
        if v_upper not in VALID_ISOLATION_LEVELS:
            raise ValueError(
                f"Invalid LOCATION_MOVE_ISOLATION_LEVEL. Valid: {VALID_ISOLATION_LEVELS}"
            )
        return v_upper
