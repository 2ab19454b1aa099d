"""Shared pytest fixtures for the transfer registry tests.

Session-backed fixtures run against an in-memory SQLite database
created through ``DatabaseConnection`` with the schema built from
the model metadata.
"""

from collections.abc import Callable, Generator

import pytest
from sqlalchemy.orm import Session

from src.database import (
    Country,
    DatabaseConnection,
    Organization,
    ProcessingActivity,
    ProcessingLocation,
    Purpose,
    Recipient,
    RecipientType,
    TransferMechanism,
)
from src.settings import settings


@pytest.fixture(autouse=True, scope="function")
def mock_env_for_tests(monkeypatch: pytest.MonkeyPatch) -> None:
    """Mock env variables for reproducible tests."""
    monkeypatch.setenv("POSTGRES_HOST", "localhost")
    monkeypatch.setenv("POSTGRES_PORT", "5432")
    monkeypatch.setenv("POSTGRES_DB", "test_registry")
    monkeypatch.setenv("POSTGRES_USER", "test_user")
    monkeypatch.setenv("POSTGRES_PASSWORD", "test_password")

    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("DEBUG", "false")
    monkeypatch.setenv("LOG_LEVEL", "INFO")


# =============================================================================
# DATABASE
# =============================================================================


@pytest.fixture
def database(monkeypatch: pytest.MonkeyPatch) -> Generator[DatabaseConnection, None, None]:
    """Fresh in-memory SQLite database with all tables created."""
    monkeypatch.setattr(settings.database, "url", "sqlite://")
    monkeypatch.setattr(DatabaseConnection, "_instance", None)
    monkeypatch.setattr(DatabaseConnection, "_initialized", False)

    db = DatabaseConnection()
    db.create_tables()
    yield db
    db.dispose()


@pytest.fixture
def session(database: DatabaseConnection) -> Generator[Session, None, None]:
    """Plain session; tests commit explicitly when they need to."""
    session = database.get_session()
    yield session
    session.rollback()
    session.close()


# =============================================================================
# REFERENCE DATA
# =============================================================================


@pytest.fixture
def countries(session: Session) -> dict[str, Country]:
    """Countries keyed by ISO code, one per jurisdiction profile."""
    rows = [
        Country(iso_code="FR", name="France", gdpr_status=["EU", "EEA"]),
        Country(iso_code="DE", name="Germany", gdpr_status=["EU", "EEA"]),
        Country(iso_code="NO", name="Norway", gdpr_status=["EEA"]),
        Country(iso_code="CH", name="Switzerland", gdpr_status=["Adequate"]),
        Country(iso_code="JP", name="Japan", gdpr_status=["Adequate"]),
        Country(iso_code="US", name="United States", gdpr_status=["Third Country"]),
        Country(iso_code="IN", name="India", gdpr_status=["Third Country"]),
    ]
    session.add_all(rows)
    session.flush()
    return {country.iso_code: country for country in rows}


@pytest.fixture
def scc(session: Session) -> TransferMechanism:
    """Standard Contractual Clauses mechanism."""
    mechanism = TransferMechanism(
        code="SCC",
        name="Standard Contractual Clauses",
        category="SAFEGUARD",
        gdpr_article="Art. 46(2)(c)",
    )
    session.add(mechanism)
    session.flush()
    return mechanism


@pytest.fixture
def organization(session: Session, countries: dict[str, Country]) -> Organization:
    """Tenant headquartered in France."""
    org = Organization(name="Acme", slug="acme", headquarters_country_id=countries["FR"].id)
    session.add(org)
    session.flush()
    return org


@pytest.fixture
def other_organization(session: Session, countries: dict[str, Country]) -> Organization:
    """Second tenant, used for isolation checks."""
    org = Organization(name="Globex", slug="globex", headquarters_country_id=countries["DE"].id)
    session.add(org)
    session.flush()
    return org


@pytest.fixture
def homeless_organization(session: Session) -> Organization:
    """Tenant without a headquarters country."""
    org = Organization(name="Nomad", slug="nomad")
    session.add(org)
    session.flush()
    return org


@pytest.fixture
def purpose(session: Session, organization: Organization) -> Purpose:
    """Purpose owned by the main tenant."""
    row = Purpose(organization_id=organization.id, name="Payroll")
    session.add(row)
    session.flush()
    return row


# =============================================================================
# FACTORIES
# =============================================================================


@pytest.fixture
def make_recipient(
    session: Session,
    organization: Organization,
) -> Callable[..., Recipient]:
    """Insert recipients directly, bypassing hierarchy rules."""

    def _make(
        name: str,
        recipient_type: RecipientType = RecipientType.PROCESSOR,
        parent: Recipient | None = None,
        org: Organization | None = None,
        is_active: bool = True,
    ) -> Recipient:
        recipient = Recipient(
            organization_id=(org or organization).id,
            name=name,
            type=recipient_type,
            parent_recipient_id=parent.id if parent else None,
            is_active=is_active,
        )
        session.add(recipient)
        session.flush()
        return recipient

    return _make


@pytest.fixture
def make_location(session: Session) -> Callable[..., ProcessingLocation]:
    """Insert processing locations directly, bypassing the transfer gate."""

    def _make(
        recipient: Recipient,
        country: Country,
        mechanism: TransferMechanism | None = None,
        service: str = "Hosting",
        is_active: bool = True,
    ) -> ProcessingLocation:
        location = ProcessingLocation(
            organization_id=recipient.organization_id,
            recipient_id=recipient.id,
            service=service,
            country=country,
            location_role="HOSTING",
            purpose_text="Service delivery",
            transfer_mechanism=mechanism,
            is_active=is_active,
        )
        session.add(location)
        session.flush()
        return location

    return _make


@pytest.fixture
def make_activity(session: Session, organization: Organization) -> Callable[..., ProcessingActivity]:
    """Insert processing activities."""

    def _make(name: str, org: Organization | None = None) -> ProcessingActivity:
        activity = ProcessingActivity(organization_id=(org or organization).id, name=name)
        session.add(activity)
        session.flush()
        return activity

    return _make
