"""Administrative listing of notifications."""

from collections.abc import Sequence

from sqlalchemy.orm import Session

from campus_notify.domain.entities import Notification, NotificationStats
from campus_notify.infrastructure.repositories import NotificationRepository


def list_notifications(
    session: Session,
    *,
    notification_type: str | None = None,
    priority: str | None = None,
    search: str | None = None,
    skip: int = 0,
    limit: int = 50,
) -> Sequence[Notification]:
    """Return notifications newest first, each with its derived send count."""

    return NotificationRepository(session).list(
        notification_type=notification_type,
        priority=priority,
        search=search or None,
        skip=skip,
        limit=limit,
    )


def get_notification_stats(session: Session) -> NotificationStats:
    return NotificationRepository(session).stats()


__all__ = ["get_notification_stats", "list_notifications"]
