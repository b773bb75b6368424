"""SQLAlchemy model for per-user notification preferences."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer
from sqlalchemy.sql import expression

from campus_notify.infrastructure.database import Base


def _enabled():
    return Column(Boolean, nullable=False, default=True, server_default=expression.true())


class NotificationPreferenceModel(Base):
    """Opt-out switches for automatic notifications."""

    __tablename__ = "notification_preference"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer,
        ForeignKey("user.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    enable_exam_reminders = _enabled()
    enable_event_notifications = _enabled()
    enable_opportunity_notifications = _enabled()
    enable_timetable_updates = _enabled()
    enable_announcements = _enabled()
    exam_reminder_1_week = _enabled()
    exam_reminder_1_day = _enabled()
    exam_reminder_on_day = _enabled()
    updated_at = Column(DateTime, nullable=True)
