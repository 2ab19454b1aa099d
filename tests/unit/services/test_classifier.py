"""Unit tests for the jurisdiction classifier."""

import pytest

from src.database.models import Country
from src.services.jurisdiction.classifier import (
    is_adequate,
    is_eu_eea,
    is_third_country,
    requires_safeguard,
    same_jurisdiction,
)


def _country(iso_code: str, *tags: str) -> Country:
    return Country(iso_code=iso_code, name=iso_code, gdpr_status=list(tags))


FRANCE = _country("FR", "EU", "EEA")
NORWAY = _country("NO", "EEA")
SWITZERLAND = _country("CH", "Adequate")
JAPAN = _country("JP", "Adequate")
USA = _country("US", "Third Country")
UNTAGGED = _country("XX")


class TestJurisdictionTags:
    @staticmethod
    def test_unknown_tags_ignored() -> None:
        country = _country("ZZ", "EU", "Galactic Federation")
        assert is_eu_eea(country)
        assert len(country.jurisdiction_tags) == 1

    @staticmethod
    def test_eea_only_counts_as_eu_eea() -> None:
        assert is_eu_eea(NORWAY)

    @staticmethod
    def test_adequate() -> None:
        assert is_adequate(SWITZERLAND)
        assert not is_adequate(FRANCE)


class TestSameJurisdiction:
    @staticmethod
    def test_eu_and_eea_share_framework() -> None:
        assert same_jurisdiction(FRANCE, NORWAY)

    @staticmethod
    def test_two_adequate_countries() -> None:
        assert same_jurisdiction(SWITZERLAND, JAPAN)

    @staticmethod
    def test_eu_and_adequate_differ() -> None:
        assert not same_jurisdiction(FRANCE, SWITZERLAND)

    @staticmethod
    def test_two_third_countries_differ() -> None:
        assert not same_jurisdiction(USA, USA)


class TestIsThirdCountry:
    @staticmethod
    @pytest.mark.parametrize(
        ("country", "expected"),
        [(FRANCE, False), (NORWAY, False), (SWITZERLAND, False), (USA, True), (UNTAGGED, True)],
    )
    def test_third_country(country: Country, expected: bool) -> None:
        assert is_third_country(country) is expected


class TestRequiresSafeguard:
    @staticmethod
    def test_eu_to_third_country() -> None:
        assert requires_safeguard(FRANCE, USA)

    @staticmethod
    def test_eea_to_third_country() -> None:
        assert requires_safeguard(NORWAY, USA)

    @staticmethod
    def test_eu_to_adequate() -> None:
        assert not requires_safeguard(FRANCE, SWITZERLAND)

    @staticmethod
    def test_non_eu_origin_never_requires() -> None:
        assert not requires_safeguard(SWITZERLAND, USA)
        assert not requires_safeguard(USA, USA)
