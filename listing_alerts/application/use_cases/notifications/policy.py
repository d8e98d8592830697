"""Decide whether a user may receive new-listing notifications."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType

from sqlalchemy.orm import Session

from listing_alerts.domain.entities import (
    OVERRIDE_MODE_ALLOW,
    OVERRIDE_MODE_BLOCK,
    NotificationOverride,
)
from listing_alerts.infrastructure.repositories import (
    NotificationOverrideRepository,
    NotificationSettingsRepository,
)
from listing_alerts.utils import ensure_app_timezone, now_in_app_timezone


class NotificationDecision(Enum):
    """Outcome of policy resolution for a single user."""

    NOTIFY = "NOTIFY"
    SUPPRESS = "SUPPRESS"


@dataclass(frozen=True)
class PolicySnapshot:
    """Immutable view of the global switch and overrides for one run.

    Every user in a match run is resolved against the same snapshot, so an
    administrator toggling the switch mid-run cannot split the run.
    """

    global_enabled: bool
    overrides: Mapping[str, NotificationOverride] = field(default_factory=dict)
    now: datetime = field(default_factory=now_in_app_timezone)

    def __post_init__(self) -> None:
        object.__setattr__(self, "overrides", MappingProxyType(dict(self.overrides)))
        object.__setattr__(self, "now", ensure_app_timezone(self.now))

    def active_override(self, user_id: str) -> NotificationOverride | None:
        """Return the override for ``user_id`` unless it has expired."""

        override = self.overrides.get(user_id)
        if override is None or not override.is_active(reference_time=self.now):
            return None
        return override


def resolve(
    snapshot: PolicySnapshot, user_id: str, *, notify_enabled: bool = True
) -> NotificationDecision:
    """Combine opt-out, override and global switch into one decision.

    A user who opted out is never notified. Otherwise an unexpired override
    wins over the global switch; an expired one is ignored.
    """

    if not notify_enabled:
        return NotificationDecision.SUPPRESS

    override = snapshot.active_override(user_id)
    if override is not None:
        if override.mode == OVERRIDE_MODE_ALLOW:
            return NotificationDecision.NOTIFY
        if override.mode == OVERRIDE_MODE_BLOCK:
            return NotificationDecision.SUPPRESS

    if snapshot.global_enabled:
        return NotificationDecision.NOTIFY
    return NotificationDecision.SUPPRESS


def load_policy_snapshot(
    session: Session,
    *,
    user_ids: Iterable[str] | None = None,
    now: datetime | None = None,
) -> PolicySnapshot:
    """Read the global switch and overrides once for a whole run."""

    setting = NotificationSettingsRepository(session).get()
    overrides = NotificationOverrideRepository(session).map_by_user(user_ids)
    return PolicySnapshot(
        global_enabled=setting.enabled,
        overrides=overrides,
        now=now or now_in_app_timezone(),
    )


__all__ = [
    "NotificationDecision",
    "PolicySnapshot",
    "load_policy_snapshot",
    "resolve",
]
