"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from campus_notify.domain.entities import Notification, NotificationStats, TargetingSpec
from campus_notify.infrastructure.models import DeliveryModel, NotificationModel
from campus_notify.utils import ensure_utc, now_utc, to_naive_utc


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects.

    ``send_count`` is never stored; every read computes it from the delivery
    rows that exist for the notification.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel()
        self._apply_entity_to_model(model, notification)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model, send_count=0)

    def get(self, notification_id: int) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        if model is None:
            return None
        return self._to_entity(model, send_count=self.count_deliveries(notification_id))

    def get_by_dedup_key(self, dedup_key: str) -> Notification | None:
        model = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.dedup_key == dedup_key)
            .one_or_none()
        )
        if model is None:
            return None
        return self._to_entity(model, send_count=self.count_deliveries(model.id))

    def exists(self, notification_id: int) -> bool:
        query = self.session.query(NotificationModel.id).filter(
            NotificationModel.id == notification_id
        )
        return self.session.query(query.exists()).scalar()

    def count_deliveries(self, notification_id: int) -> int:
        return (
            self.session.query(func.count(DeliveryModel.id))
            .filter(DeliveryModel.notification_id == notification_id)
            .scalar()
            or 0
        )

    def mark_delivered(self, notification_id: int) -> bool:
        """Record that fan-out finished; returns ``False`` if the row is gone."""

        updated = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.id == notification_id)
            .filter(NotificationModel.delivered_at.is_(None))
            .update(
                {NotificationModel.delivered_at: to_naive_utc(now_utc())},
                synchronize_session=False,
            )
        )
        self.session.commit()
        return bool(updated) or self.exists(notification_id)

    def delete(self, notification_id: int) -> bool:
        """Delete a notification and its deliveries.

        Returns ``True`` when a record was removed and ``False`` when the
        requested notification was not found.
        """

        model = self.session.get(NotificationModel, notification_id)
        if model is None:
            return False
        self.session.delete(model)
        self.session.commit()
        return True

    def list(
        self,
        *,
        notification_type: str | None = None,
        priority: str | None = None,
        search: str | None = None,
        skip: int = 0,
        limit: int | None = 50,
    ) -> Sequence[Notification]:
        counts = self._send_count_subquery()
        query = self.session.query(
            NotificationModel, func.coalesce(counts.c.send_count, 0)
        ).outerjoin(counts, counts.c.notification_id == NotificationModel.id)

        if notification_type:
            query = query.filter(NotificationModel.type == notification_type)
        if priority:
            query = query.filter(NotificationModel.priority == priority)
        if search:
            pattern = f"%{search.strip().lower()}%"
            query = query.filter(
                or_(
                    func.lower(NotificationModel.title).like(pattern),
                    func.lower(NotificationModel.message).like(pattern),
                )
            )

        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        ).offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return [
            self._to_entity(model, send_count=int(send_count))
            for model, send_count in query.all()
        ]

    def stats(self) -> NotificationStats:
        counts = self._send_count_subquery()
        rows = (
            self.session.query(func.coalesce(counts.c.send_count, 0))
            .select_from(NotificationModel)
            .outerjoin(counts, counts.c.notification_id == NotificationModel.id)
            .all()
        )
        send_counts = [int(value) for (value,) in rows]
        sent = sum(1 for value in send_counts if value > 0)
        return NotificationStats(
            total_notifications=len(send_counts),
            sent_notifications=sent,
            pending_notifications=len(send_counts) - sent,
            total_recipients=sum(send_counts),
        )

    def _send_count_subquery(self):
        return (
            self.session.query(
                DeliveryModel.notification_id.label("notification_id"),
                func.count(DeliveryModel.id).label("send_count"),
            )
            .group_by(DeliveryModel.notification_id)
            .subquery()
        )

    @staticmethod
    def _apply_entity_to_model(model: NotificationModel, notification: Notification) -> None:
        targeting = notification.targeting
        model.title = notification.title
        model.message = notification.message
        model.type = notification.type
        model.priority = notification.priority
        model.target_all_users = targeting.all_users
        model.target_branches = sorted(targeting.branch_ids)
        model.target_semesters = sorted(targeting.semesters)
        model.target_years = sorted(targeting.years)
        model.target_users = sorted(targeting.user_ids)
        model.scheduled_for = to_naive_utc(notification.scheduled_for or now_utc())
        model.expires_at = to_naive_utc(notification.expires_at)
        model.related_resource_type = notification.related_resource_type
        model.related_resource_id = notification.related_resource_id
        model.extra = dict(notification.metadata or {})
        model.dedup_key = notification.dedup_key
        model.created_by = notification.created_by
        model.created_at = to_naive_utc(notification.created_at or now_utc())
        model.delivered_at = to_naive_utc(notification.delivered_at)
        model.recipients = sorted(notification.recipients)

    @staticmethod
    def _to_entity(model: NotificationModel, *, send_count: int) -> Notification:
        return Notification(
            id=model.id,
            title=model.title,
            message=model.message,
            type=model.type,
            priority=model.priority,
            targeting=TargetingSpec.build(
                all_users=model.target_all_users,
                branch_ids=model.target_branches,
                semesters=model.target_semesters,
                years=model.target_years,
                user_ids=model.target_users,
            ),
            scheduled_for=ensure_utc(model.scheduled_for),
            expires_at=ensure_utc(model.expires_at),
            related_resource_type=model.related_resource_type,
            related_resource_id=model.related_resource_id,
            metadata=dict(model.extra or {}),
            dedup_key=model.dedup_key,
            created_by=model.created_by,
            created_at=ensure_utc(model.created_at),
            delivered_at=ensure_utc(model.delivered_at),
            recipients=frozenset(int(user_id) for user_id in model.recipients or ()),
            send_count=send_count,
        )


__all__ = ["NotificationRepository"]
