"""Use cases of the new-listing notification engine."""

from .dispatch import NotificationDispatcher, claim_items
from .matching import matches
from .policy import NotificationDecision, PolicySnapshot, load_policy_snapshot, resolve
from .preferences import get_preferences, update_preferences
from .publish import PublishReport, find_matching_users, notify_new_listing
from .retry import RetryReport, retry_failed_notifications
from .settings import (
    OverrideExpiredError,
    UserNotFoundError,
    UserNotificationStatus,
    get_active_user_override,
    get_global_settings,
    get_queue_summary,
    get_user_notification_status,
    remove_user_override,
    set_user_override,
    update_global_settings,
)
from .validators import normalize_property_type, normalize_search_filter

__all__ = [
    "NotificationDecision",
    "NotificationDispatcher",
    "OverrideExpiredError",
    "PolicySnapshot",
    "PublishReport",
    "RetryReport",
    "UserNotFoundError",
    "UserNotificationStatus",
    "claim_items",
    "find_matching_users",
    "get_active_user_override",
    "get_global_settings",
    "get_preferences",
    "get_queue_summary",
    "get_user_notification_status",
    "load_policy_snapshot",
    "matches",
    "normalize_property_type",
    "normalize_search_filter",
    "notify_new_listing",
    "remove_user_override",
    "resolve",
    "retry_failed_notifications",
    "set_user_override",
    "update_global_settings",
]
