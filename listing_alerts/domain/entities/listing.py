"""Read-only view of a published ad used when matching subscriptions."""

from __future__ import annotations

from dataclasses import dataclass

from .search_filter import PUBLISHER_TYPE_BROKER, PUBLISHER_TYPE_OWNER

LISTING_STATUS_ACTIVE = "ACTIVE"

# Publisher account types that are treated as brokers by subscription filters.
BROKER_USER_TYPES = frozenset({"BROKER", "AGENCY"})


def publisher_type_for(user_type: str | None) -> str:
    """Map the publishing account type to ``OWNER`` or ``BROKER``."""

    if user_type and user_type.upper() in BROKER_USER_TYPES:
        return PUBLISHER_TYPE_BROKER
    return PUBLISHER_TYPE_OWNER


@dataclass(frozen=True)
class ListingSnapshot:
    """Attributes of an ad captured at the moment it is matched."""

    ad_id: str
    status: str
    category_id: str
    publisher_type: str
    city_id: str | None = None
    price: float | None = None
    property_type: str | None = None
    title: str = ""

    def is_active(self) -> bool:
        return self.status == LISTING_STATUS_ACTIVE


__all__ = [
    "BROKER_USER_TYPES",
    "LISTING_STATUS_ACTIVE",
    "ListingSnapshot",
    "publisher_type_for",
]
