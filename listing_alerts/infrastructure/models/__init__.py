"""ORM models used by the application infrastructure."""

from .ad import AdModel
from .global_setting import NotificationSettingsModel
from .notification_queue import NotificationQueueModel
from .override import NotificationOverrideModel
from .reference import CategoryModel, CityModel
from .subscription import UserPreferenceModel
from .user import UserModel

__all__ = [
    "AdModel",
    "CategoryModel",
    "CityModel",
    "NotificationOverrideModel",
    "NotificationQueueModel",
    "NotificationSettingsModel",
    "UserModel",
    "UserPreferenceModel",
]
