"""Persistence helpers for notification preferences."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy.orm import Session

from campus_notify.domain.entities import NotificationPreference
from campus_notify.infrastructure.models import NotificationPreferenceModel
from campus_notify.utils import ensure_utc, now_utc, to_naive_utc

_SWITCHES = (
    "enable_exam_reminders",
    "enable_event_notifications",
    "enable_opportunity_notifications",
    "enable_timetable_updates",
    "enable_announcements",
    "exam_reminder_1_week",
    "exam_reminder_1_day",
    "exam_reminder_on_day",
)


class NotificationPreferenceRepository:
    """Read and store per-user notification switches."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int) -> NotificationPreference | None:
        model = self._get_model(user_id)
        return self._to_entity(model) if model else None

    def list_for_users(self, user_ids: Iterable[int]) -> list[NotificationPreference]:
        """Return stored preferences for ``user_ids``; users without a row are omitted."""

        ids = sorted(set(user_ids))
        if not ids:
            return []
        query = self.session.query(NotificationPreferenceModel).filter(
            NotificationPreferenceModel.user_id.in_(ids)
        )
        return [self._to_entity(model) for model in query.all()]

    def save(self, preference: NotificationPreference) -> NotificationPreference:
        model = self._get_model(preference.user_id)
        if model is None:
            model = NotificationPreferenceModel(user_id=preference.user_id)
        for name in _SWITCHES:
            setattr(model, name, bool(getattr(preference, name)))
        model.updated_at = to_naive_utc(now_utc())
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def _get_model(self, user_id: int) -> NotificationPreferenceModel | None:
        return (
            self.session.query(NotificationPreferenceModel)
            .filter(NotificationPreferenceModel.user_id == user_id)
            .one_or_none()
        )

    @staticmethod
    def _to_entity(model: NotificationPreferenceModel) -> NotificationPreference:
        values = {name: bool(getattr(model, name)) for name in _SWITCHES}
        return NotificationPreference(
            user_id=model.user_id,
            updated_at=ensure_utc(model.updated_at),
            **values,
        )


__all__ = ["NotificationPreferenceRepository"]
