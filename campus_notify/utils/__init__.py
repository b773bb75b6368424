"""Utility helpers for reusable functionality."""

from .datetime import (
    ensure_app_timezone,
    ensure_utc,
    get_app_timezone,
    now_utc,
    to_naive_utc,
    today_in_app_timezone,
)

__all__ = [
    "ensure_app_timezone",
    "ensure_utc",
    "get_app_timezone",
    "now_utc",
    "to_naive_utc",
    "today_in_app_timezone",
]
