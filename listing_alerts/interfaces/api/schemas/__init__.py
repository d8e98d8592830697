from .notification import (
    GlobalSettingsRead,
    GlobalSettingsUpdate,
    NotificationStatusRead,
    OverrideRead,
    OverrideUpsertRequest,
    PreferencesRead,
    PreferencesUpdate,
    PublishResponse,
    QueueSummaryRead,
    RetryFailedRequest,
    RetryFailedResponse,
    SearchFilterPayload,
)

__all__ = [
    "GlobalSettingsRead",
    "GlobalSettingsUpdate",
    "NotificationStatusRead",
    "OverrideRead",
    "OverrideUpsertRequest",
    "PreferencesRead",
    "PreferencesUpdate",
    "PublishResponse",
    "QueueSummaryRead",
    "RetryFailedRequest",
    "RetryFailedResponse",
    "SearchFilterPayload",
]
