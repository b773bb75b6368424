"""Delivery fan-out: materialize one delivery record per recipient."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy.orm import Session

from campus_notify.config import get_settings
from campus_notify.domain.entities import Notification
from campus_notify.infrastructure.repositories import (
    DeliveryRepository,
    NotificationRepository,
)

from .create_notification import create_notification
from .errors import DuplicateNotificationError, NotificationNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FanOutResult:
    """Outcome of a fan-out call."""

    notification_id: int
    audience_size: int
    created: int
    send_count: int
    aborted: bool = False


def fan_out(
    session: Session,
    notification_id: int,
    audience: Iterable[int],
    *,
    chunk_size: int | None = None,
) -> FanOutResult:
    """Insert delivery records for ``audience`` in chunks.

    Safe to call any number of times with the same audience: existing
    (notification, user) pairs are skipped. Stops early, keeping what was
    written, if the notification is deleted while the loop runs.
    """

    size = chunk_size or get_settings().fanout_chunk_size
    recipients = sorted(set(audience))
    notifications = NotificationRepository(session)
    deliveries = DeliveryRepository(session)

    created = 0
    for start in range(0, len(recipients), size):
        if not notifications.exists(notification_id):
            return _aborted(notification_id, len(recipients), created)
        created += deliveries.insert_missing(
            notification_id, recipients[start : start + size]
        )

    if not notifications.exists(notification_id):
        return _aborted(notification_id, len(recipients), created)

    send_count = notifications.count_deliveries(notification_id)
    logger.info(
        "Fan-out for notification %s created %s of %s deliveries (send count %s)",
        notification_id,
        created,
        len(recipients),
        send_count,
    )
    return FanOutResult(
        notification_id=notification_id,
        audience_size=len(recipients),
        created=created,
        send_count=send_count,
    )


def _aborted(notification_id: int, audience_size: int, created: int) -> FanOutResult:
    logger.warning(
        "Notification %s was deleted during fan-out; stopped after %s deliveries",
        notification_id,
        created,
    )
    return FanOutResult(
        notification_id=notification_id,
        audience_size=audience_size,
        created=created,
        send_count=0,
        aborted=True,
    )


def deliver_notification(
    session: Session,
    notification_id: int,
    *,
    chunk_size: int | None = None,
) -> FanOutResult:
    """Fan a stored notification out to the recipients captured at creation.

    An unfinished fan-out (crash, timeout, race) is resumed with the same
    recipient set; users who joined the directory since are not added. A
    completed fan-out is left untouched.
    """

    repository = NotificationRepository(session)
    notification = repository.get(notification_id)
    if notification is None:
        raise NotificationNotFoundError(notification_id)

    if notification.delivered_at is not None:
        logger.debug("Notification %s was already delivered", notification_id)
        return FanOutResult(
            notification_id=notification_id,
            audience_size=notification.send_count,
            created=0,
            send_count=notification.send_count,
        )

    result = fan_out(
        session, notification_id, notification.recipients, chunk_size=chunk_size
    )
    if result.aborted:
        return result
    if not repository.mark_delivered(notification_id):
        return _aborted(notification_id, result.audience_size, result.created)
    return result


def publish_notification(session: Session, **fields) -> tuple[Notification, FanOutResult]:
    """Create a notification and deliver it right away.

    Accepts the keyword arguments of :func:`create_notification`.
    """

    notification = create_notification(session, **fields)
    result = deliver_notification(session, notification.id)
    refreshed = NotificationRepository(session).get(notification.id) or notification
    return refreshed, result


def publish_or_resume(session: Session, **fields) -> tuple[Notification, bool]:
    """Publish a keyed notification unless it exists already.

    Returns the notification and ``True`` when it was created by this call. An
    existing notification whose fan-out never completed is delivered now.
    """

    try:
        notification, _ = publish_notification(session, **fields)
    except DuplicateNotificationError as exc:
        if exc.existing_id is None:
            raise
        logger.info("Notification '%s' already exists; not creating it again", exc.dedup_key)
        deliver_notification(session, exc.existing_id)
        existing = NotificationRepository(session).get(exc.existing_id)
        if existing is None:
            raise NotificationNotFoundError(exc.existing_id) from exc
        return existing, False
    return notification, True


__all__ = [
    "FanOutResult",
    "deliver_notification",
    "fan_out",
    "publish_notification",
    "publish_or_resume",
]
