"""Read-only access to published ads."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.orm import Session

from listing_alerts.domain.entities import (
    ListingSnapshot,
    normalize_property_type,
    publisher_type_for,
)
from listing_alerts.infrastructure.models import AdModel


@dataclass(frozen=True)
class ListingEmailDetails:
    """Display fields used when rendering the new-listing email."""

    ad_id: str
    title: str
    description: str
    category_name: str
    city_name: str | None
    price: float | None
    ad_type: str | None
    property_type: str | None
    image_url: str | None


class ListingRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get_snapshot(self, ad_id: str) -> ListingSnapshot | None:
        model = self.session.get(AdModel, ad_id)
        if model is None:
            return None
        return ListingSnapshot(
            ad_id=model.id,
            status=model.status,
            category_id=model.category_id,
            city_id=model.city_id,
            price=model.price,
            property_type=_property_type(model),
            publisher_type=publisher_type_for(model.user.user_type if model.user else None),
            title=model.title,
        )

    def get_email_details(self, ad_id: str) -> ListingEmailDetails | None:
        model = self.session.get(AdModel, ad_id)
        if model is None:
            return None
        category = model.category
        city = model.city
        return ListingEmailDetails(
            ad_id=model.id,
            title=model.title,
            description=model.description or "",
            category_name=(category.name_he or category.name) if category else "",
            city_name=(city.name_he or city.name) if city else None,
            price=model.price,
            ad_type=model.ad_type,
            property_type=_property_type(model),
            image_url=model.image_url,
        )


def _property_type(model: AdModel) -> str | None:
    custom_fields = model.custom_fields if isinstance(model.custom_fields, dict) else {}
    value = custom_fields.get("propertyType")
    if not value or not str(value).strip():
        return None
    return normalize_property_type(str(value))


__all__ = ["ListingEmailDetails", "ListingRepository"]
