"""Singleton switch that enables or disables new-listing notifications."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class GlobalNotificationSetting:
    id: int | None
    enabled: bool
    updated_at: datetime | None = None


__all__ = ["GlobalNotificationSetting"]
