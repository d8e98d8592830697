"""Domain entities exposed by the application."""

from .dispatch_report import DispatchReport
from .global_setting import GlobalNotificationSetting
from .listing import (
    BROKER_USER_TYPES,
    LISTING_STATUS_ACTIVE,
    ListingSnapshot,
    publisher_type_for,
)
from .override import (
    OVERRIDE_MODE_ALLOW,
    OVERRIDE_MODE_BLOCK,
    OVERRIDE_MODES,
    NotificationOverride,
)
from .queue_item import (
    NOTIFICATION_STATUS_FAILED,
    NOTIFICATION_STATUS_PENDING,
    NOTIFICATION_STATUS_SENDING,
    NOTIFICATION_STATUS_SENT,
    NOTIFICATION_STATUSES,
    NotificationQueueItem,
)
from .recipient import ADMIN_ROLES, Recipient
from .search_filter import (
    PROPERTY_TYPE_ALIASES,
    PUBLISHER_TYPE_BROKER,
    PUBLISHER_TYPE_OWNER,
    PUBLISHER_TYPES,
    InvalidSearchFilterError,
    SearchFilter,
    normalize_property_type,
)
from .subscription import SubscriptionUpdate, UserSubscription

__all__ = [
    "ADMIN_ROLES",
    "BROKER_USER_TYPES",
    "DispatchReport",
    "GlobalNotificationSetting",
    "InvalidSearchFilterError",
    "LISTING_STATUS_ACTIVE",
    "ListingSnapshot",
    "NOTIFICATION_STATUS_FAILED",
    "NOTIFICATION_STATUS_PENDING",
    "NOTIFICATION_STATUS_SENDING",
    "NOTIFICATION_STATUS_SENT",
    "NOTIFICATION_STATUSES",
    "NotificationOverride",
    "NotificationQueueItem",
    "OVERRIDE_MODE_ALLOW",
    "OVERRIDE_MODE_BLOCK",
    "OVERRIDE_MODES",
    "PROPERTY_TYPE_ALIASES",
    "PUBLISHER_TYPE_BROKER",
    "PUBLISHER_TYPE_OWNER",
    "PUBLISHER_TYPES",
    "Recipient",
    "SearchFilter",
    "SubscriptionUpdate",
    "UserSubscription",
    "normalize_property_type",
    "publisher_type_for",
]
