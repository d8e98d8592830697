"""Use cases for reading and updating a user's subscription."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy.orm import Session

from listing_alerts.domain.entities import SubscriptionUpdate, UserSubscription
from listing_alerts.infrastructure.repositories import SubscriptionRepository

from .validators import normalize_search_filter

logger = logging.getLogger(__name__)

_UNSET: Any = object()


def get_preferences(session: Session, user_id: str) -> UserSubscription:
    """Return the user's subscription, creating the default (disabled) one."""

    return SubscriptionRepository(session).get_or_create(user_id)


def update_preferences(
    session: Session,
    user_id: str,
    *,
    notify_enabled: bool | None = None,
    weekly_digest: bool | None = None,
    filters: Mapping[str, Any] | None = _UNSET,
) -> UserSubscription:
    """Apply a partial preference update.

    ``filters`` is normalized here so match runs only ever read validated
    filters; passing ``None`` clears the filter (match everything), omitting
    it keeps the stored one.
    """

    update = SubscriptionUpdate(notify_enabled=notify_enabled, weekly_digest=weekly_digest)
    if filters is not _UNSET:
        update.search_filter = normalize_search_filter(filters)

    subscription = SubscriptionRepository(session).apply_update(user_id, update)
    logger.info(
        "Updated notification preferences for user %s (notify_enabled=%s)",
        user_id,
        subscription.notify_enabled,
    )
    return subscription


__all__ = ["get_preferences", "update_preferences"]
