"""Repository implementations for infrastructure layer."""

from .listing_repository import ListingEmailDetails, ListingRepository
from .notification_queue_repository import NotificationQueueRepository
from .notification_settings_repository import NotificationSettingsRepository
from .override_repository import NotificationOverrideRepository
from .subscription_repository import SubscriptionRepository
from .user_repository import UserRepository

__all__ = [
    "ListingEmailDetails",
    "ListingRepository",
    "NotificationOverrideRepository",
    "NotificationQueueRepository",
    "NotificationSettingsRepository",
    "SubscriptionRepository",
    "UserRepository",
]
