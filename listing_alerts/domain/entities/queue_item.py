"""Domain entity tracking delivery of one listing notification to one user."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

NOTIFICATION_STATUS_PENDING = "PENDING"
NOTIFICATION_STATUS_SENDING = "SENDING"
NOTIFICATION_STATUS_SENT = "SENT"
NOTIFICATION_STATUS_FAILED = "FAILED"

NOTIFICATION_STATUSES = (
    NOTIFICATION_STATUS_PENDING,
    NOTIFICATION_STATUS_SENDING,
    NOTIFICATION_STATUS_SENT,
    NOTIFICATION_STATUS_FAILED,
)


@dataclass
class NotificationQueueItem:
    """Queue row keyed by ``(user_id, ad_id)``."""

    id: int | None
    user_id: str
    ad_id: str
    status: str
    retry_count: int = 0
    error_message: str | None = None
    sent_at: datetime | None = None
    claimed_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


__all__ = [
    "NotificationQueueItem",
    "NOTIFICATION_STATUS_PENDING",
    "NOTIFICATION_STATUS_SENDING",
    "NOTIFICATION_STATUS_SENT",
    "NOTIFICATION_STATUS_FAILED",
    "NOTIFICATION_STATUSES",
]
