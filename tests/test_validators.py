"""Tests for search filter normalization on the preferences write path."""

from __future__ import annotations

import pytest

from listing_alerts.application.use_cases.notifications import (
    normalize_property_type,
    normalize_search_filter,
)
from listing_alerts.domain.entities import InvalidSearchFilterError, SearchFilter


def test_hebrew_labels_map_to_canonical_codes() -> None:
    assert normalize_property_type("דירה") == "APARTMENT"
    assert normalize_property_type(" פנטהאוז ") == "PENTHOUSE"
    assert normalize_property_type("garden_apartment") == "GARDEN_APARTMENT"


def test_normalize_search_filter_canonicalizes_values() -> None:
    search_filter = normalize_search_filter(
        {
            "propertyTypes": ["דירה", "studio", ""],
            "publisherTypes": [" broker "],
            "minPrice": 0,
        }
    )

    assert search_filter.property_types == frozenset({"APARTMENT", "STUDIO"})
    assert search_filter.publisher_types == frozenset({"BROKER"})
    assert search_filter.min_price == 0


def test_empty_filter_is_wildcard() -> None:
    assert normalize_search_filter(None) == SearchFilter()
    assert normalize_search_filter({}) == SearchFilter()


def test_negative_price_is_rejected() -> None:
    with pytest.raises(InvalidSearchFilterError):
        normalize_search_filter({"maxPrice": -1})


def test_unknown_publisher_type_is_rejected() -> None:
    with pytest.raises(InvalidSearchFilterError):
        normalize_search_filter({"publisherTypes": ["developer"]})
