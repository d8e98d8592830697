"""Operator use cases for the global switch and per-user overrides."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.orm import Session

from listing_alerts.domain.entities import (
    OVERRIDE_MODE_BLOCK,
    OVERRIDE_MODES,
    GlobalNotificationSetting,
    NotificationOverride,
)
from listing_alerts.infrastructure.repositories import (
    NotificationOverrideRepository,
    NotificationQueueRepository,
    NotificationSettingsRepository,
    SubscriptionRepository,
    UserRepository,
)
from listing_alerts.utils import ensure_app_timezone, now_in_app_timezone

from .policy import NotificationDecision, load_policy_snapshot, resolve

logger = logging.getLogger(__name__)

DEFAULT_BLOCK_REASON = "חסום על ידי מנהל המערכת"


class UserNotFoundError(ValueError):
    """Raised when an override targets an unknown user."""


class OverrideExpiredError(ValueError):
    """Raised when an override would already be expired when saved."""


@dataclass(frozen=True)
class UserNotificationStatus:
    """What a user sees about their own notification eligibility."""

    can_receive: bool
    is_blocked: bool
    block_reason: str | None
    global_enabled: bool
    notify_enabled: bool
    override: NotificationOverride | None


def get_global_settings(session: Session) -> GlobalNotificationSetting:
    return NotificationSettingsRepository(session).get()


def update_global_settings(session: Session, *, enabled: bool) -> GlobalNotificationSetting:
    setting = NotificationSettingsRepository(session).set_enabled(enabled)
    logger.info("Global new-listing notifications %s", "enabled" if enabled else "disabled")
    return setting


def set_user_override(
    session: Session,
    *,
    mode: str,
    expires_at: datetime,
    reason: str | None = None,
    user_id: str | None = None,
    email: str | None = None,
    now: datetime | None = None,
) -> NotificationOverride:
    """Create or replace the override of the user given by ``user_id`` or ``email``."""

    normalized_mode = mode.strip().upper()
    if normalized_mode not in OVERRIDE_MODES:
        raise ValueError(f"Unknown override mode: {mode}")

    current = ensure_app_timezone(now) or now_in_app_timezone()
    expires = ensure_app_timezone(expires_at)
    if expires <= current:
        raise OverrideExpiredError("The override expiry must be in the future")

    users = UserRepository(session)
    if user_id:
        user = users.get(user_id)
    elif email:
        user = users.get_by_email(email)
    else:
        raise ValueError("Either user_id or email is required")
    if user is None:
        raise UserNotFoundError(f"User {user_id or email} not found")

    override = NotificationOverrideRepository(session).upsert(
        user_id=user.id,
        mode=normalized_mode,
        expires_at=expires,
        reason=(reason or "").strip() or None,
    )
    logger.info(
        "Set %s notification override for user %s until %s",
        override.mode,
        user.id,
        override.expires_at.isoformat(),
    )
    return override


def remove_user_override(session: Session, user_id: str) -> bool:
    removed = NotificationOverrideRepository(session).delete_for_user(user_id)
    if removed:
        logger.info("Removed notification override for user %s", user_id)
    return bool(removed)


def get_active_user_override(
    session: Session, user_id: str, *, now: datetime | None = None
) -> NotificationOverride | None:
    """Return the user's override while it is in force; expired rows are ignored."""

    override = NotificationOverrideRepository(session).get_for_user(user_id)
    if override is None or not override.is_active(reference_time=now):
        return None
    return override


def get_user_notification_status(
    session: Session, user_id: str, *, now: datetime | None = None
) -> UserNotificationStatus:
    snapshot = load_policy_snapshot(session, user_ids=[user_id], now=now)
    subscription = SubscriptionRepository(session).get(user_id)
    notify_enabled = subscription.notify_enabled if subscription else False

    override = snapshot.active_override(user_id)
    decision = resolve(snapshot, user_id, notify_enabled=notify_enabled)
    is_blocked = override is not None and override.mode == OVERRIDE_MODE_BLOCK
    return UserNotificationStatus(
        can_receive=decision is NotificationDecision.NOTIFY,
        is_blocked=is_blocked,
        block_reason=(override.reason or DEFAULT_BLOCK_REASON) if is_blocked else None,
        global_enabled=snapshot.global_enabled,
        notify_enabled=notify_enabled,
        override=override,
    )


def get_queue_summary(session: Session) -> dict[str, int]:
    return NotificationQueueRepository(session).count_by_status()


__all__ = [
    "DEFAULT_BLOCK_REASON",
    "OverrideExpiredError",
    "UserNotFoundError",
    "UserNotificationStatus",
    "get_active_user_override",
    "get_global_settings",
    "get_queue_summary",
    "get_user_notification_status",
    "remove_user_override",
    "set_user_override",
    "update_global_settings",
]
