"""Recipient-side read and dismiss tracking."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy.orm import Session

from campus_notify.domain.entities import UserNotification
from campus_notify.infrastructure.repositories import DeliveryRepository
from campus_notify.utils import now_utc


def mark_read(session: Session, *, notification_id: int, user_id: int) -> None:
    """Mark the caller's delivery as read.

    Does nothing when it is already read or when the caller is not a
    recipient; the two cases are indistinguishable to the caller.
    """

    DeliveryRepository(session).mark_read(notification_id, user_id)


def mark_dismissed(session: Session, *, notification_id: int, user_id: int) -> None:
    """Mark the caller's delivery as dismissed without touching the read flag."""

    DeliveryRepository(session).mark_dismissed(notification_id, user_id)


def mark_all_read(session: Session, *, user_id: int) -> int:
    return DeliveryRepository(session).mark_all_read(user_id)


def get_unread_count(session: Session, *, user_id: int, now: datetime | None = None) -> int:
    """Count unread deliveries whose notification has not expired."""

    return DeliveryRepository(session).count_unread(user_id, now=now or now_utc())


def list_user_notifications(
    session: Session,
    *,
    user_id: int,
    skip: int = 0,
    limit: int = 20,
    include_read: bool = True,
    include_dismissed: bool = False,
    include_expired: bool = False,
    now: datetime | None = None,
) -> Sequence[UserNotification]:
    return DeliveryRepository(session).list_for_user(
        user_id,
        now=now or now_utc(),
        include_read=include_read,
        include_dismissed=include_dismissed,
        include_expired=include_expired,
        skip=skip,
        limit=limit,
    )


__all__ = [
    "get_unread_count",
    "list_user_notifications",
    "mark_all_read",
    "mark_dismissed",
    "mark_read",
]
