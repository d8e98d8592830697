"""Aggregate application use cases."""

from .notifications import notify_new_listing, retry_failed_notifications

__all__ = [
    "notify_new_listing",
    "retry_failed_notifications",
]
