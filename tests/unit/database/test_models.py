"""Unit tests for model helpers that need no database."""

from src.database.models import Country, JurisdictionTag, LocationRole, RecipientType
from src.database.models.enums import check_in


class TestCountryJurisdictionTags:
    @staticmethod
    def test_known_tags() -> None:
        country = Country(iso_code="FR", name="France", gdpr_status=["EU", "EEA"])
        assert country.jurisdiction_tags == {JurisdictionTag.EU, JurisdictionTag.EEA}

    @staticmethod
    def test_order_irrelevant() -> None:
        first = Country(iso_code="FR", name="France", gdpr_status=["EU", "EEA"])
        second = Country(iso_code="FR", name="France", gdpr_status=["EEA", "EU"])
        assert first.jurisdiction_tags == second.jurisdiction_tags

    @staticmethod
    def test_unknown_and_missing_status() -> None:
        assert Country(iso_code="XX", name="X", gdpr_status=["Moon"]).jurisdiction_tags == set()
        assert Country(iso_code="YY", name="Y", gdpr_status=None).jurisdiction_tags == set()

    @staticmethod
    def test_adequate_value_matches_stored_string() -> None:
        assert JurisdictionTag.ADEQUATE == "Adequate"
        assert JurisdictionTag.THIRD_COUNTRY == "Third Country"


class TestCheckIn:
    @staticmethod
    def test_location_roles() -> None:
        assert check_in("location_role", LocationRole) == (
            "location_role IN ('HOSTING', 'PROCESSING', 'BOTH')"
        )

    @staticmethod
    def test_all_recipient_types_listed() -> None:
        expression = check_in("type", RecipientType)
        assert all(f"'{member.value}'" in expression for member in RecipientType)
