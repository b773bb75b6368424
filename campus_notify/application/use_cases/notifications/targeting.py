"""Validation of notification content and targeting specifications."""

from __future__ import annotations

from datetime import datetime

from campus_notify.config import get_settings
from campus_notify.domain.entities import (
    NOTIFICATION_PRIORITIES,
    NOTIFICATION_TYPES,
    TargetingSpec,
)
from campus_notify.utils import ensure_utc

from .errors import NotificationValidationError


def validate_targeting(targeting: TargetingSpec) -> TargetingSpec:
    """Return ``targeting`` unchanged or raise :class:`NotificationValidationError`.

    A spec with ``all_users`` unset and every filter empty is rejected rather
    than being treated as "everyone".
    """

    if targeting.all_users:
        return targeting

    if targeting.is_empty:
        raise NotificationValidationError(
            "Select all users or at least one branch, semester, year or user"
        )

    settings = get_settings()
    invalid_semesters = sorted(
        s for s in targeting.semesters if not 1 <= s <= settings.max_semester
    )
    if invalid_semesters:
        raise NotificationValidationError(
            f"Semesters must be between 1 and {settings.max_semester}: {invalid_semesters}"
        )
    invalid_years = sorted(y for y in targeting.years if not 1 <= y <= settings.max_year)
    if invalid_years:
        raise NotificationValidationError(
            f"Years must be between 1 and {settings.max_year}: {invalid_years}"
        )
    if any(not branch.strip() for branch in targeting.branch_ids):
        raise NotificationValidationError("Branch identifiers must not be blank")
    return targeting


def validate_content(
    *,
    title: str,
    message: str,
    notification_type: str,
    priority: str,
    scheduled_for: datetime | None,
    expires_at: datetime | None,
) -> tuple[str, str]:
    """Check the content fields and return the stripped title and message."""

    clean_title = (title or "").strip()
    clean_message = (message or "").strip()
    if not clean_title:
        raise NotificationValidationError("Title is required")
    if not clean_message:
        raise NotificationValidationError("Message is required")
    if notification_type not in NOTIFICATION_TYPES:
        raise NotificationValidationError(f"Unknown notification type '{notification_type}'")
    if priority not in NOTIFICATION_PRIORITIES:
        raise NotificationValidationError(f"Unknown priority '{priority}'")
    if expires_at is not None and scheduled_for is not None:
        if ensure_utc(expires_at) <= ensure_utc(scheduled_for):
            raise NotificationValidationError("Expiry must be later than the scheduled time")
    return clean_title, clean_message


__all__ = ["validate_content", "validate_targeting"]
