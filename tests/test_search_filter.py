"""Unit tests for search filter parsing and matching."""

from __future__ import annotations

import pytest

from listing_alerts.application.use_cases.notifications import matches
from listing_alerts.domain.entities import (
    InvalidSearchFilterError,
    ListingSnapshot,
    SearchFilter,
    publisher_type_for,
)
from listing_alerts.infrastructure.repositories import ListingRepository


def _listing(**overrides) -> ListingSnapshot:
    values = {
        "ad_id": "ad-1",
        "status": "ACTIVE",
        "category_id": "cat-apartments",
        "city_id": "city-tlv",
        "price": 1_500_000,
        "property_type": "APARTMENT",
        "publisher_type": "OWNER",
    }
    values.update(overrides)
    return ListingSnapshot(**values)


def test_missing_filter_matches_everything() -> None:
    assert SearchFilter.from_payload(None).is_wildcard()
    assert SearchFilter.from_payload({}).is_wildcard()
    assert matches(SearchFilter(), _listing(city_id=None, price=None, property_type=None))


def test_every_constrained_dimension_must_match() -> None:
    search_filter = SearchFilter.from_payload(
        {
            "categoryIds": ["cat-apartments"],
            "cityIds": ["city-tlv", "city-hfa"],
            "minPrice": 1_000_000,
            "maxPrice": 2_000_000,
            "propertyTypes": ["APARTMENT"],
            "publisherTypes": ["OWNER"],
        }
    )

    assert matches(search_filter, _listing())
    assert not matches(search_filter, _listing(category_id="cat-commercial"))
    assert not matches(search_filter, _listing(city_id="city-eilat"))
    assert not matches(search_filter, _listing(price=2_500_000))
    assert not matches(search_filter, _listing(property_type="STORE"))
    assert not matches(search_filter, _listing(publisher_type="BROKER"))


def test_price_bounds_are_inclusive() -> None:
    search_filter = SearchFilter(min_price=1_000, max_price=2_000)

    assert matches(search_filter, _listing(price=1_000))
    assert matches(search_filter, _listing(price=2_000))
    assert not matches(search_filter, _listing(price=999))


def test_listing_without_price_fails_any_price_bound() -> None:
    assert not matches(SearchFilter(min_price=0), _listing(price=None))
    assert not matches(SearchFilter(max_price=10), _listing(price=None))


def test_unset_city_fails_city_filter() -> None:
    assert not matches(SearchFilter(city_ids=frozenset({"city-tlv"})), _listing(city_id=None))


def test_payload_round_trip_is_canonical() -> None:
    search_filter = SearchFilter.from_payload(
        {"cityIds": ["b", "a", " "], "publisherTypes": ["BROKER"], "minPrice": 5}
    )

    assert search_filter.to_payload() == {
        "cityIds": ["a", "b"],
        "minPrice": 5,
        "publisherTypes": ["BROKER"],
    }


@pytest.mark.parametrize(
    "payload",
    [
        ["cat-apartments"],
        {"cityIds": "city-tlv"},
        {"minPrice": "cheap"},
        {"minPrice": 10, "maxPrice": 5},
        {"publisherTypes": ["DEVELOPER"]},
    ],
)
def test_malformed_payloads_are_rejected(payload) -> None:
    with pytest.raises(InvalidSearchFilterError):
        SearchFilter.from_payload(payload)


@pytest.mark.parametrize(
    ("user_type", "expected"),
    [("BROKER", "BROKER"), ("agency", "BROKER"), ("PRIVATE", "OWNER"), (None, "OWNER")],
)
def test_publisher_type_from_account_type(user_type, expected) -> None:
    assert publisher_type_for(user_type) == expected


def test_stored_property_type_labels_are_canonicalized() -> None:
    search_filter = SearchFilter.from_payload({"propertyTypes": ["דירה", "penthouse"]})

    assert search_filter.property_types == frozenset({"APARTMENT", "PENTHOUSE"})
    assert matches(search_filter, _listing(property_type="APARTMENT"))


def test_listing_snapshot_canonicalizes_property_type(make_ad, session) -> None:
    make_ad("ad-he", property_type="דירה")
    make_ad("ad-blank", property_type=" ")

    repository = ListingRepository(session)
    assert repository.get_snapshot("ad-he").property_type == "APARTMENT"
    assert repository.get_snapshot("ad-blank").property_type is None
    assert repository.get_email_details("ad-he").property_type == "APARTMENT"
