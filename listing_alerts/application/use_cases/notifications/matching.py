"""Evaluate a listing against a user's saved search filter."""

from __future__ import annotations

from listing_alerts.domain.entities import ListingSnapshot, SearchFilter


def matches(search_filter: SearchFilter, listing: ListingSnapshot) -> bool:
    """Return ``True`` when ``listing`` satisfies every constrained dimension."""

    if search_filter.category_ids and listing.category_id not in search_filter.category_ids:
        return False

    if search_filter.city_ids and (
        listing.city_id is None or listing.city_id not in search_filter.city_ids
    ):
        return False

    if search_filter.min_price is not None or search_filter.max_price is not None:
        if listing.price is None:
            return False
        if search_filter.min_price is not None and listing.price < search_filter.min_price:
            return False
        if search_filter.max_price is not None and listing.price > search_filter.max_price:
            return False

    if search_filter.property_types and (
        listing.property_type is None
        or listing.property_type not in search_filter.property_types
    ):
        return False

    if search_filter.publisher_types and listing.publisher_type not in search_filter.publisher_types:
        return False

    return True


__all__ = ["matches"]
