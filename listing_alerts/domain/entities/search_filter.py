"""Saved search criteria that a user subscribes to."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

PUBLISHER_TYPE_OWNER = "OWNER"
PUBLISHER_TYPE_BROKER = "BROKER"
PUBLISHER_TYPES = frozenset({PUBLISHER_TYPE_OWNER, PUBLISHER_TYPE_BROKER})

# Labels the marketplace UI stores for property types, keyed to canonical codes.
PROPERTY_TYPE_ALIASES: Mapping[str, str] = {
    "דירה": "APARTMENT",
    "בית": "HOUSE",
    "דופלקס": "DUPLEX",
    "גן": "GARDEN_APARTMENT",
    "פנטהאוז": "PENTHOUSE",
    "סטודיו": "STUDIO",
    "מגרש": "LAND",
    "חנות": "STORE",
    "משרד": "OFFICE",
    "מחסן": "WAREHOUSE",
}


def normalize_property_type(value: str) -> str:
    """Return the canonical code for a UI label or code (``"דירה"`` -> ``APARTMENT``)."""

    label = value.strip()
    return PROPERTY_TYPE_ALIASES.get(label, label.upper())


class InvalidSearchFilterError(ValueError):
    """Raised when a stored filter payload cannot be interpreted."""


@dataclass(frozen=True)
class SearchFilter:
    """Optional-field search criteria. Empty dimensions match everything."""

    category_ids: frozenset[str] = field(default_factory=frozenset)
    city_ids: frozenset[str] = field(default_factory=frozenset)
    min_price: float | None = None
    max_price: float | None = None
    property_types: frozenset[str] = field(default_factory=frozenset)
    publisher_types: frozenset[str] = field(default_factory=frozenset)

    def is_wildcard(self) -> bool:
        """Return ``True`` when no dimension is constrained."""

        return not (
            self.category_ids
            or self.city_ids
            or self.min_price is not None
            or self.max_price is not None
            or self.property_types
            or self.publisher_types
        )

    @classmethod
    def from_payload(cls, payload: Any) -> "SearchFilter":
        """Build a filter from its stored JSON representation.

        ``None`` and ``{}`` produce the wildcard filter. Property types are
        stored as UI labels by older clients and are canonicalized here. Anything that is not a
        mapping of the known dimensions raises :class:`InvalidSearchFilterError`.
        """

        if payload is None:
            return cls()
        if not isinstance(payload, Mapping):
            raise InvalidSearchFilterError(
                f"Filter payload must be an object, got {type(payload).__name__}"
            )

        min_price = _price(payload, "minPrice")
        max_price = _price(payload, "maxPrice")
        if min_price is not None and max_price is not None and min_price > max_price:
            raise InvalidSearchFilterError("minPrice cannot be greater than maxPrice")

        publisher_types = _identifiers(payload, "publisherTypes")
        unknown = publisher_types - PUBLISHER_TYPES
        if unknown:
            raise InvalidSearchFilterError(
                f"Unknown publisher types: {', '.join(sorted(unknown))}"
            )

        return cls(
            category_ids=_identifiers(payload, "categoryIds"),
            city_ids=_identifiers(payload, "cityIds"),
            min_price=min_price,
            max_price=max_price,
            property_types=frozenset(
                normalize_property_type(item)
                for item in _identifiers(payload, "propertyTypes")
            ),
            publisher_types=publisher_types,
        )

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON representation stored with the subscription."""

        payload: dict[str, Any] = {}
        if self.category_ids:
            payload["categoryIds"] = sorted(self.category_ids)
        if self.city_ids:
            payload["cityIds"] = sorted(self.city_ids)
        if self.min_price is not None:
            payload["minPrice"] = self.min_price
        if self.max_price is not None:
            payload["maxPrice"] = self.max_price
        if self.property_types:
            payload["propertyTypes"] = sorted(self.property_types)
        if self.publisher_types:
            payload["publisherTypes"] = sorted(self.publisher_types)
        return payload


def _identifiers(payload: Mapping[str, Any], key: str) -> frozenset[str]:
    value = payload.get(key)
    if value is None:
        return frozenset()
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        raise InvalidSearchFilterError(f"{key} must be a list")
    identifiers: set[str] = set()
    for item in value:
        if isinstance(item, bool) or not isinstance(item, (str, int)):
            raise InvalidSearchFilterError(f"{key} contains an invalid value: {item!r}")
        text = str(item).strip()
        if text:
            identifiers.add(text)
    return frozenset(identifiers)


def _price(payload: Mapping[str, Any], key: str) -> float | None:
    value = payload.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidSearchFilterError(f"{key} must be a number")
    return value


__all__ = [
    "InvalidSearchFilterError",
    "PROPERTY_TYPE_ALIASES",
    "PUBLISHER_TYPE_BROKER",
    "PUBLISHER_TYPE_OWNER",
    "PUBLISHER_TYPES",
    "SearchFilter",
    "normalize_property_type",
]
