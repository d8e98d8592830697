"""Contract between the dispatch loop and the notification transport."""

from __future__ import annotations

from typing import Protocol


class SendError(Exception):
    """Raised by a sender when a notification could not be delivered."""


class NotificationSender(Protocol):
    """Deliver the new-listing notification for ``ad_id`` to ``user_id``.

    Implementations return normally on success and raise on failure.
    """

    def send(self, user_id: str, ad_id: str) -> None:
        ...


__all__ = ["NotificationSender", "SendError"]
