"""Helpers for working with timezone-aware datetimes.

Timestamps are persisted as naive UTC values so that SQLite and PostgreSQL
behave the same way; the domain layer always works with aware datetimes.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone, tzinfo
from functools import lru_cache
from typing import Final

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from campus_notify.config import get_settings

_DEFAULT_TIMEZONE: Final[str] = "Asia/Kolkata"
_OFFSET_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?:UTC|GMT)(?P<sign>[+-])(?P<hours>\d{1,2})(?::?(?P<minutes>\d{2}))?$",
    re.IGNORECASE,
)


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    """Return the configured application timezone.

    The timezone is resolved using the ``APP_TIMEZONE`` environment variable.
    Values such as ``UTC+05:30`` are accepted when the name is not a known
    IANA zone; anything else falls back to ``Asia/Kolkata``.
    """

    settings = get_settings()
    tz_name = (settings.app_timezone or "").strip() or _DEFAULT_TIMEZONE
    return _resolve_timezone(tz_name)


def now_utc() -> datetime:
    """Return the current time as an aware UTC datetime."""

    return datetime.now(tz=timezone.utc)


def ensure_utc(value: datetime | None) -> datetime | None:
    """Normalize ``value`` to an aware UTC datetime (naive values are UTC)."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_naive_utc(value: datetime | None) -> datetime | None:
    """Return ``value`` converted to UTC without ``tzinfo`` for storage."""

    normalized = ensure_utc(value)
    if normalized is None:
        return None
    return normalized.replace(tzinfo=None)


def ensure_app_timezone(value: datetime | None) -> datetime | None:
    """Express ``value`` in the configured timezone (naive values are UTC)."""

    normalized = ensure_utc(value)
    if normalized is None:
        return None
    return normalized.astimezone(get_app_timezone())


def today_in_app_timezone(now: datetime | None = None) -> date:
    """Return the calendar day of ``now`` (default: current time) in the app timezone."""

    localized = ensure_app_timezone(now or now_utc())
    if localized is None:  # pragma: no cover
        raise RuntimeError("Failed to compute the application calendar day")
    return localized.date()


def _resolve_timezone(tz_name: str) -> tzinfo:
    """Resolve ``tz_name`` into a ``timezone`` instance."""

    try:
        return ZoneInfo(tz_name)
    except ZoneInfoNotFoundError:
        match = _OFFSET_PATTERN.match(tz_name)
        if match:
            sign = -1 if match.group("sign") == "-" else 1
            hours = int(match.group("hours"))
            minutes = int(match.group("minutes") or 0)
            offset = timedelta(hours=hours, minutes=minutes)
            return timezone(sign * offset)
    return ZoneInfo(_DEFAULT_TIMEZONE)
