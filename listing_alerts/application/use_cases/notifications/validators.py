"""Normalization of search filters at the preferences write boundary."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from listing_alerts.domain.entities import (
    InvalidSearchFilterError,
    SearchFilter,
    normalize_property_type,
)


def normalize_search_filter(raw: Mapping[str, Any] | None) -> SearchFilter:
    """Validate and canonicalize a filter submitted by the user.

    Publisher types are upper-cased and blank property types dropped; the
    property type labels themselves are canonicalized by
    :meth:`SearchFilter.from_payload`. Raises
    :class:`InvalidSearchFilterError` for contradictory or unknown values.
    """

    if not raw:
        return SearchFilter()

    cleaned = dict(raw)
    property_types = cleaned.get("propertyTypes")
    if isinstance(property_types, (list, tuple, set, frozenset)):
        cleaned["propertyTypes"] = [
            item for item in property_types if isinstance(item, str) and item.strip()
        ]
    publisher_types = cleaned.get("publisherTypes")
    if isinstance(publisher_types, (list, tuple, set, frozenset)):
        cleaned["publisherTypes"] = [
            item.strip().upper() for item in publisher_types if isinstance(item, str)
        ]
    for key in ("minPrice", "maxPrice"):
        value = cleaned.get(key)
        if value is not None and not isinstance(value, bool) and isinstance(value, (int, float)):
            if value < 0:
                raise InvalidSearchFilterError(f"{key} cannot be negative")

    return SearchFilter.from_payload(cleaned)


__all__ = ["normalize_property_type", "normalize_search_filter"]
