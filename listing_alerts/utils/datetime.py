"""Conversions between the aware datetimes of the domain and stored values.

Timestamps are stored as naive local time in ``APP_TIMEZONE``; the domain
and policy code only ever compares aware datetimes.
"""

from __future__ import annotations

from datetime import datetime
from functools import lru_cache
from zoneinfo import ZoneInfo

from listing_alerts.config import get_settings


@lru_cache(maxsize=1)
def get_app_timezone() -> ZoneInfo:
    """Return the zone named by ``APP_TIMEZONE`` (validated by ``Settings``)."""

    return ZoneInfo(get_settings().app_timezone)


def now_in_app_timezone() -> datetime:
    return datetime.now(tz=get_app_timezone())


def now_in_app_naive_datetime() -> datetime:
    """Return the current local time in the form it is stored."""

    return now_in_app_timezone().replace(tzinfo=None)


def ensure_app_timezone(value: datetime | None) -> datetime | None:
    """Return ``value`` as an aware datetime in the app timezone.

    Naive values come from storage and are therefore already local.
    """

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=get_app_timezone())
    return value.astimezone(get_app_timezone())


def ensure_app_naive_datetime(value: datetime | None) -> datetime | None:
    """Return ``value`` in the app timezone with ``tzinfo`` stripped for storage."""

    localized = ensure_app_timezone(value)
    return localized.replace(tzinfo=None) if localized is not None else None
