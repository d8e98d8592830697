"""Domain entity describing a user's new-listing subscription."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .search_filter import SearchFilter


@dataclass
class UserSubscription:
    """Notification preferences owned by a single user.

    ``filter_payload`` keeps the raw stored JSON; :meth:`search_filter` parses it
    on demand so a malformed row only affects its own user.
    """

    user_id: str
    notify_enabled: bool
    filter_payload: dict[str, Any] | None = None
    weekly_digest: bool = False
    updated_at: datetime | None = None

    def search_filter(self) -> SearchFilter:
        """Return the parsed filter, raising ``InvalidSearchFilterError``."""

        return SearchFilter.from_payload(self.filter_payload)


@dataclass
class SubscriptionUpdate:
    """Partial update applied through the preferences endpoint.

    ``None`` leaves the stored value untouched.
    """

    notify_enabled: bool | None = None
    weekly_digest: bool | None = None
    search_filter: SearchFilter | None = None


__all__ = ["SubscriptionUpdate", "UserSubscription"]
