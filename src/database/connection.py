"""Database connection pool management with SQLAlchemy 2.0.

Provides transactional sessions with proper connection pooling
and lifecycle management. PostgreSQL is the production target;
SQLite URLs are accepted for local runs and tests.
"""

from collections.abc import Generator
from contextlib import contextmanager
from sqlite3 import Connection as SQLiteConnection

from sqlalchemy import Engine, create_engine, event, text
from sqlalchemy.orm import Session, sessionmaker

from src.database.models import Base
from src.settings import settings
from src.utils.logger import setup_logger

logger = setup_logger("database.connection")


class DatabaseConnection:
    """Manages the connection pool and transactional session scopes.

    This class implements the Singleton pattern to ensure a single
    connection pool is shared across the application.

    Attributes:
        _instance: Singleton instance.
        _engine: SQLAlchemy engine.
        _session_factory: Session factory.

    Example:
        ```python
        db = DatabaseConnection()
        with db.session() as session:
            result = session.execute(text("SELECT 1"))
        ```
    """

    _instance: "DatabaseConnection | None" = None
    _initialized: bool = False

    def __new__(cls) -> "DatabaseConnection":
        """Create singleton instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        """Initialize connection pool if not already done."""
        if DatabaseConnection._initialized:
            return

        self._engine = self._create_engine()
        self._session_factory = self._create_session_factory()
        DatabaseConnection._initialized = True

    @staticmethod
    def _create_engine() -> Engine:
        """Create SQLAlchemy engine with connection pooling.

        Returns:
            SQLAlchemy Engine configured with QueuePool, or a
            StaticPool-backed engine for SQLite.
        """
        db_settings = settings.database
        engine = create_engine(
            db_settings.sync_url,
            echo=settings.debug,
            **db_settings.engine_options(),
        )
        if db_settings.is_sqlite and db_settings.sqlite_foreign_keys:
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    def _create_session_factory(self) -> sessionmaker[Session]:
        """Create session factory.

        Returns:
            Configured sessionmaker.
        """
        return sessionmaker(
            bind=self._engine,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )

    @contextmanager
    def session(self, isolation_level: str | None = None) -> Generator[Session, None, None]:
        """Provide a transactional session scope.

        Automatically commits on success, rolls back on exception,
        and closes the session when done.

        Args:
            isolation_level: Optional transaction isolation (e.g. "SERIALIZABLE").
                Ignored on SQLite, whose transactions are always serializable.

        Yields:
            SQLAlchemy Session instance.

        Raises:
            Exception: Re-raises any exception after rollback.
        """
        session = self._session_factory()
        try:
            if isolation_level and settings.database.supports_isolation_level:
                session.connection(execution_options={"isolation_level": isolation_level})
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def get_session(self) -> Session:
        """Get a new session without context manager.

        Caller is responsible for commit/rollback/close.

        Returns:
            New SQLAlchemy Session instance.
        """
        return self._session_factory()

    def create_tables(self) -> None:
        """Create all tables known to the model metadata."""
        Base.metadata.create_all(self._engine)

    def check_connection(self) -> bool:
        """Test database connectivity with a simple query.

        Returns:
            True if connection successful, False otherwise.
        """
        try:
            with self.session() as session:
                session.execute(text("SELECT 1"))
            return True
        except Exception:  # noqa: BLE001
            return False

    def dispose(self) -> None:
        """Dispose the connection pool and release resources.

        Should be called during application shutdown.
        """
        self._engine.dispose()

    @property
    def engine(self) -> Engine:
        """Get the underlying engine.

        Returns:
            SQLAlchemy Engine instance.
        """
        return self._engine


def _enable_sqlite_foreign_keys(dbapi_connection: SQLiteConnection, _: object) -> None:
    """Turn on FK enforcement so ON DELETE rules apply on SQLite."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# =============================================================================
# MODULE-LEVEL CONVENIENCE FUNCTIONS
# =============================================================================

_db: DatabaseConnection | None = None


def get_database() -> DatabaseConnection:
    """Get the singleton DatabaseConnection instance.

    Creates the instance on first call (lazy initialization).

    Returns:
        DatabaseConnection singleton instance.
    """
    global _db  # noqa: PLW0603
    if _db is None:
        _db = DatabaseConnection()
    return _db


def get_session() -> Generator[Session, None, None]:
    """Dependency-style generator for database sessions.

    Yields:
        SQLAlchemy Session with automatic transaction management.
    """
    db = get_database()
    with db.session() as session:
        yield session


def init_database() -> None:
    """Initialize database connection pool.

    Call during application startup to eagerly create connections.
    """
    db = get_database()
    if db.check_connection():
        logger.info("Database connection established")
    else:
        logger.error("Database connection failed")


def close_database() -> None:
    """Close database connection pool.

    Call during application shutdown to release resources.
    """
    global _db  # noqa: PLW0603
    if _db is not None:
        _db.dispose()
        _db = None
        DatabaseConnection._instance = None
        DatabaseConnection._initialized = False
        logger.info("Database connections closed")
