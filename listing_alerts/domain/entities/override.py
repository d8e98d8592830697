"""Domain entity for administrator notification overrides."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from listing_alerts.utils import ensure_app_timezone, now_in_app_timezone

OVERRIDE_MODE_ALLOW = "ALLOW"
OVERRIDE_MODE_BLOCK = "BLOCK"
OVERRIDE_MODES = frozenset({OVERRIDE_MODE_ALLOW, OVERRIDE_MODE_BLOCK})


@dataclass
class NotificationOverride:
    """Time-limited exception to the global notification switch for one user."""

    id: int | None
    user_id: str
    mode: str
    expires_at: datetime
    reason: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def is_active(self, *, reference_time: datetime | None = None) -> bool:
        """Return ``True`` while ``reference_time`` is strictly before expiry."""

        current = ensure_app_timezone(reference_time) or now_in_app_timezone()
        expires_at = ensure_app_timezone(self.expires_at)
        return current < expires_at


__all__ = [
    "NotificationOverride",
    "OVERRIDE_MODE_ALLOW",
    "OVERRIDE_MODE_BLOCK",
    "OVERRIDE_MODES",
]
