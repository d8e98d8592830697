"""Email transport used to deliver new-listing notifications."""

from __future__ import annotations

import logging
from collections.abc import Callable
from html import escape

from sqlalchemy.orm import Session

from listing_alerts.config import get_settings
from listing_alerts.domain.delivery import SendError
from listing_alerts.infrastructure.email import (
    EmailDeliveryError,
    EmailNotConfiguredError,
    send_email,
)
from listing_alerts.infrastructure.repositories import (
    ListingEmailDetails,
    ListingRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)

_DESCRIPTION_EXCERPT_LENGTH = 200

AD_TYPE_LABELS = {
    "FOR_SALE": "למכירה",
    "FOR_RENT": "להשכרה",
    "WANTED_FOR_SALE": "מחפש לקנות",
    "WANTED_FOR_RENT": "מחפש להשכיר",
    "WANTED_HOLIDAY": "מחפש נופש",
    "WANTED_COMMERCIAL": "מחפש מסחרי",
}

PROPERTY_TYPE_LABELS = {
    "APARTMENT": "דירה",
    "HOUSE": "בית פרטי",
    "GARDEN_APARTMENT": "דירת גן",
    "PENTHOUSE": "פנטהאוז",
    "DUPLEX": "דופלקס",
    "STUDIO": "סטודיו",
    "LAND": "מגרש",
    "STORE": "חנות",
    "OFFICE": "משרד",
    "WAREHOUSE": "מחסן",
}


def render_new_listing_email(details: ListingEmailDetails, *, client_url: str) -> tuple[str, str]:
    """Return the ``(subject, html)`` pair announcing ``details`` to a subscriber."""

    base_url = client_url.rstrip("/")
    ad_url = f"{base_url}/ads/{details.ad_id}"
    title = escape(details.title)
    price = f"₪{details.price:,.0f}" if details.price else ""
    city = escape(details.city_name or "לא צוין")

    description = details.description
    if len(description) > _DESCRIPTION_EXCERPT_LENGTH:
        description = description[:_DESCRIPTION_EXCERPT_LENGTH] + "..."

    rows = [
        f"<p><strong>קטגוריה:</strong> {escape(details.category_name)}</p>",
        f"<p><strong>עיר:</strong> {city}</p>",
        f"<p><strong>מחיר:</strong> {price}</p>",
    ]
    if details.ad_type:
        label = AD_TYPE_LABELS.get(details.ad_type, details.ad_type)
        rows.append(f"<p><strong>סוג מודעה:</strong> {escape(label)}</p>")
    if details.property_type:
        label = PROPERTY_TYPE_LABELS.get(details.property_type, details.property_type)
        rows.append(f"<p><strong>סוג נכס:</strong> {escape(label)}</p>")

    image = (
        f'<img src="{escape(details.image_url)}" alt="{title}" '
        'style="max-width: 100%; height: auto; border-radius: 8px; margin: 20px 0;">'
        if details.image_url
        else ""
    )

    html_content = "".join(
        (
            '<div dir="rtl" style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">',
            '<h2 style="color: #2563eb;">נכס חדש התפרסם!</h2>',
            image,
            f"<h3>{title}</h3>",
            '<div style="background: #f3f4f6; padding: 15px; border-radius: 8px; margin: 20px 0;">',
            *rows,
            "</div>",
            f'<div style="margin: 20px 0;"><p>{escape(description)}</p></div>',
            '<div style="text-align: center; margin: 30px 0;">',
            f'<a href="{escape(ad_url)}" style="background: #2563eb; color: white; padding: 12px 30px; '
            'text-decoration: none; border-radius: 6px; display: inline-block;">צפה בנכס</a>',
            "</div>",
            '<hr style="border: none; border-top: 1px solid #e5e7eb; margin: 30px 0;">',
            '<p style="font-size: 12px; color: #6b7280;">',
            "קיבלת מייל זה כי הפעלת התראות על נכסים חדשים.<br>",
            f'<a href="{escape(base_url)}/profile" style="color: #2563eb;">לניהול ההגדרות שלך</a>',
            "</p>",
            "</div>",
        )
    )
    return f"נכס חדש: {details.title}", html_content


class EmailNotificationSender:
    """Look up the recipient and the ad, then email the announcement."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def send(self, user_id: str, ad_id: str) -> None:
        session = self._session_factory()
        try:
            recipient = UserRepository(session).get(user_id)
            details = ListingRepository(session).get_email_details(ad_id)
        finally:
            session.close()

        if recipient is None:
            raise SendError(f"User {user_id} not found")
        if details is None:
            raise SendError(f"Ad {ad_id} not found")

        subject, html_content = render_new_listing_email(
            details, client_url=get_settings().client_url
        )
        try:
            send_email(subject, html_content, recipient.email)
        except (EmailNotConfiguredError, EmailDeliveryError) as exc:
            raise SendError(str(exc)) from exc

        logger.info("Notification email sent to %s for ad %s", recipient.email, ad_id)


__all__ = [
    "EmailNotificationSender",
    "render_new_listing_email",
]
