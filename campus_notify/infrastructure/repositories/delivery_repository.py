"""Persistence helpers for per-recipient delivery records."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import datetime

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from campus_notify.domain.entities import Delivery, UserNotification
from campus_notify.infrastructure.models import DeliveryModel, NotificationModel
from campus_notify.utils import ensure_utc, now_utc, to_naive_utc

from .notification_repository import NotificationRepository

logger = logging.getLogger(__name__)


class DeliveryRepository:
    """Create delivery rows and update their read/dismiss state."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def existing_user_ids(self, notification_id: int, user_ids: Iterable[int]) -> set[int]:
        ids = list(user_ids)
        if not ids:
            return set()
        query = (
            self.session.query(DeliveryModel.user_id)
            .filter(DeliveryModel.notification_id == notification_id)
            .filter(DeliveryModel.user_id.in_(ids))
        )
        return {user_id for (user_id,) in query.all()}

    def insert_missing(self, notification_id: int, user_ids: Iterable[int]) -> int:
        """Insert a delivery row for every user that does not have one yet.

        A unique-constraint violation means another fan-out got there first and
        is counted as success. Returns the number of rows this call created.
        """

        ids = sorted(set(user_ids))
        if not ids:
            return 0
        existing = self.existing_user_ids(notification_id, ids)
        pending = [user_id for user_id in ids if user_id not in existing]
        if not pending:
            return 0

        self.session.add_all(
            DeliveryModel(notification_id=notification_id, user_id=user_id)
            for user_id in pending
        )
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            logger.debug(
                "Bulk insert for notification %s collided; retrying row by row",
                notification_id,
            )
            return self._insert_one_by_one(notification_id, pending)
        return len(pending)

    def _insert_one_by_one(self, notification_id: int, user_ids: Sequence[int]) -> int:
        created = 0
        for user_id in user_ids:
            self.session.add(DeliveryModel(notification_id=notification_id, user_id=user_id))
            try:
                self.session.commit()
            except IntegrityError:
                self.session.rollback()
                continue
            created += 1
        return created

    def mark_read(self, notification_id: int, user_id: int) -> bool:
        """Set the read flag once; returns ``True`` only when a row changed."""

        updated = (
            self.session.query(DeliveryModel)
            .filter(DeliveryModel.notification_id == notification_id)
            .filter(DeliveryModel.user_id == user_id)
            .filter(DeliveryModel.is_read.is_(False))
            .update(
                {
                    DeliveryModel.is_read: True,
                    DeliveryModel.read_at: to_naive_utc(now_utc()),
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        return bool(updated)

    def mark_dismissed(self, notification_id: int, user_id: int) -> bool:
        """Set the dismissed flag once; returns ``True`` only when a row changed."""

        updated = (
            self.session.query(DeliveryModel)
            .filter(DeliveryModel.notification_id == notification_id)
            .filter(DeliveryModel.user_id == user_id)
            .filter(DeliveryModel.is_dismissed.is_(False))
            .update(
                {
                    DeliveryModel.is_dismissed: True,
                    DeliveryModel.dismissed_at: to_naive_utc(now_utc()),
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        return bool(updated)

    def mark_all_read(self, user_id: int) -> int:
        updated = (
            self.session.query(DeliveryModel)
            .filter(DeliveryModel.user_id == user_id)
            .filter(DeliveryModel.is_read.is_(False))
            .update(
                {
                    DeliveryModel.is_read: True,
                    DeliveryModel.read_at: to_naive_utc(now_utc()),
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        return int(updated or 0)

    def count_unread(self, user_id: int, *, now: datetime) -> int:
        reference = to_naive_utc(now)
        return (
            self.session.query(DeliveryModel.id)
            .join(NotificationModel, NotificationModel.id == DeliveryModel.notification_id)
            .filter(DeliveryModel.user_id == user_id)
            .filter(DeliveryModel.is_read.is_(False))
            .filter(
                or_(
                    NotificationModel.expires_at.is_(None),
                    NotificationModel.expires_at > reference,
                )
            )
            .count()
        )

    def get(self, notification_id: int, user_id: int) -> Delivery | None:
        model = (
            self.session.query(DeliveryModel)
            .filter(DeliveryModel.notification_id == notification_id)
            .filter(DeliveryModel.user_id == user_id)
            .one_or_none()
        )
        return self._to_entity(model) if model else None

    def list_user_ids(self, notification_id: int) -> set[int]:
        query = self.session.query(DeliveryModel.user_id).filter(
            DeliveryModel.notification_id == notification_id
        )
        return {user_id for (user_id,) in query.all()}

    def list_for_user(
        self,
        user_id: int,
        *,
        now: datetime,
        include_read: bool = True,
        include_dismissed: bool = False,
        include_expired: bool = False,
        skip: int = 0,
        limit: int | None = 50,
    ) -> Sequence[UserNotification]:
        query = (
            self.session.query(DeliveryModel, NotificationModel)
            .join(NotificationModel, NotificationModel.id == DeliveryModel.notification_id)
            .filter(DeliveryModel.user_id == user_id)
        )
        if not include_read:
            query = query.filter(DeliveryModel.is_read.is_(False))
        if not include_dismissed:
            query = query.filter(DeliveryModel.is_dismissed.is_(False))
        if not include_expired:
            query = query.filter(
                or_(
                    NotificationModel.expires_at.is_(None),
                    NotificationModel.expires_at > to_naive_utc(now),
                )
            )
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        ).offset(skip)
        if limit is not None:
            query = query.limit(limit)

        # Per-row send counts are irrelevant to a recipient's inbox.
        return [
            UserNotification(
                notification=NotificationRepository._to_entity(notification, send_count=0),
                delivery=self._to_entity(delivery),
            )
            for delivery, notification in query.all()
        ]

    @staticmethod
    def _to_entity(model: DeliveryModel) -> Delivery:
        return Delivery(
            id=model.id,
            notification_id=model.notification_id,
            user_id=model.user_id,
            is_read=bool(model.is_read),
            read_at=ensure_utc(model.read_at),
            is_dismissed=bool(model.is_dismissed),
            dismissed_at=ensure_utc(model.dismissed_at),
            created_at=ensure_utc(model.created_at),
        )


__all__ = ["DeliveryRepository"]
