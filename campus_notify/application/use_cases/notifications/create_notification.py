"""Use cases for creating and deleting notification content records."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from campus_notify.domain.entities import (
    PRIORITY_NORMAL,
    Notification,
    TargetingSpec,
)
from campus_notify.infrastructure.repositories import NotificationRepository
from campus_notify.utils import now_utc

from .audience import snapshot_audience
from .errors import (
    DuplicateNotificationError,
    NotificationNotFoundError,
    NotificationValidationError,
)
from .targeting import validate_content, validate_targeting

logger = logging.getLogger(__name__)

# Key namespaces written by the scheduler and the domain-event bridge.
SYSTEM_DEDUP_PREFIXES = ("exam:", "event:", "opportunity:", "welcome:")


def exam_reminder_key(exam_id: int | str, offset_days: int) -> str:
    """Return the deduplication key of the reminder for ``exam_id`` at ``offset_days``."""

    return f"exam:{exam_id}:{offset_days}"


def create_notification(
    session: Session,
    *,
    title: str,
    message: str,
    notification_type: str,
    targeting: TargetingSpec,
    priority: str = PRIORITY_NORMAL,
    scheduled_for: datetime | None = None,
    expires_at: datetime | None = None,
    related_resource_type: str | None = None,
    related_resource_id: str | int | None = None,
    metadata: dict[str, Any] | None = None,
    dedup_key: str | None = None,
    created_by: int | None = None,
) -> Notification:
    """Validate and persist a notification without delivering it.

    The recipient set is resolved here and stored with the notification;
    fan-out never resolves it again.
    """

    scheduled_for = scheduled_for or now_utc()
    clean_title, clean_message = validate_content(
        title=title,
        message=message,
        notification_type=notification_type,
        priority=priority,
        scheduled_for=scheduled_for,
        expires_at=expires_at,
    )
    validate_targeting(targeting)
    if created_by is not None and dedup_key and dedup_key.startswith(SYSTEM_DEDUP_PREFIXES):
        raise NotificationValidationError(
            f"Deduplication key '{dedup_key}' is reserved for automatic notifications"
        )

    repository = NotificationRepository(session)
    if dedup_key:
        existing = repository.get_by_dedup_key(dedup_key)
        if existing is not None:
            raise DuplicateNotificationError(dedup_key, existing.id)

    recipients = snapshot_audience(
        session,
        targeting=targeting,
        notification_type=notification_type,
        created_by=created_by,
        metadata=metadata,
    )

    entity = Notification(
        id=None,
        title=clean_title,
        message=clean_message,
        type=notification_type,
        priority=priority,
        targeting=targeting,
        scheduled_for=scheduled_for,
        expires_at=expires_at,
        related_resource_type=related_resource_type,
        related_resource_id=(
            str(related_resource_id) if related_resource_id is not None else None
        ),
        metadata=dict(metadata or {}),
        dedup_key=dedup_key,
        created_by=created_by,
        created_at=now_utc(),
        recipients=recipients,
    )
    try:
        saved = repository.create(entity)
    except IntegrityError as exc:
        session.rollback()
        if dedup_key:
            # Lost a race with a concurrent creator of the same key.
            existing = repository.get_by_dedup_key(dedup_key)
            if existing is not None:
                raise DuplicateNotificationError(dedup_key, existing.id) from exc
        raise

    logger.info(
        "Created %s notification %s (%s)", saved.type, saved.id, saved.dedup_key or "-"
    )
    return saved


def delete_notification(session: Session, notification_id: int) -> None:
    """Delete a notification; its delivery records are removed with it."""

    if not NotificationRepository(session).delete(notification_id):
        raise NotificationNotFoundError(notification_id)
    logger.info("Deleted notification %s", notification_id)


def get_notification(session: Session, notification_id: int) -> Notification:
    notification = NotificationRepository(session).get(notification_id)
    if notification is None:
        raise NotificationNotFoundError(notification_id)
    return notification


__all__ = [
    "create_notification",
    "delete_notification",
    "exam_reminder_key",
    "get_notification",
]
