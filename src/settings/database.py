"""Database configuration settings.

The registry targets PostgreSQL, whose row locks and SERIALIZABLE
isolation back location moves. A ``sqlite`` DATABASE_URL switches to a
single shared in-process connection for local runs and tests.
"""

from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.pool import QueuePool, StaticPool


class DatabaseSettings(BaseSettings):
    """Registry database configuration.

    Attributes:
        host: PostgreSQL host.
        port: PostgreSQL port.
        database: PostgreSQL database name.
        user: PostgreSQL user.
        password: PostgreSQL password.
        url: Full connection URL, wins over the individual parts.
        pool_size: Persistent connections kept by QueuePool.
        pool_overflow: Extra connections allowed under load.
        pool_timeout: Seconds to wait for a free connection.
        sqlite_foreign_keys: Turn on FK enforcement for SQLite connections.
    """

    host: str = Field(default="localhost", alias="POSTGRES_HOST")
    port: int = Field(default=5432, alias="POSTGRES_PORT")
    database: str = Field(default="transfer_registry", alias="POSTGRES_DB")
    user: str = Field(default="registry_user", alias="POSTGRES_USER")
    password: str = Field(default="", alias="POSTGRES_PASSWORD")
    url: str | None = Field(default=None, alias="DATABASE_URL")

    pool_size: int = Field(default=5, ge=1, alias="DB_POOL_SIZE")
    pool_overflow: int = Field(default=10, ge=0, alias="DB_POOL_OVERFLOW")
    pool_timeout: int = Field(default=30, ge=1, alias="DB_POOL_TIMEOUT")
    sqlite_foreign_keys: bool = Field(default=True, alias="DB_SQLITE_FOREIGN_KEYS")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_configured(self) -> bool:
        """Check if PostgreSQL credentials or an explicit URL are set."""
        return bool(self.password or self.url)

    @property
    def sync_url(self) -> str:
        """Resolved SQLAlchemy URL (psycopg2 driver for PostgreSQL)."""
        if self.url:
            return self.url
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"

    @property
    def is_sqlite(self) -> bool:
        """Whether the resolved URL targets SQLite."""
        return self.sync_url.startswith("sqlite")

    @property
    def supports_isolation_level(self) -> bool:
        """Whether per-session isolation levels are applied.

        SQLite transactions are already serializable, so the option
        is skipped there.
        """
        return not self.is_sqlite

    def engine_options(self) -> dict[str, Any]:
        """Keyword arguments for ``create_engine`` matching the backend.

        Returns:
            StaticPool options for SQLite, QueuePool sizing otherwise.
        """
        if self.is_sqlite:
            return {
                "poolclass": StaticPool,
                "connect_args": {"check_same_thread": False},
            }

        return {
            "poolclass": QueuePool,
            "pool_size": self.pool_size,
            "max_overflow": self.pool_overflow,
            "pool_timeout": self.pool_timeout,
            "pool_pre_ping": True,
        }
