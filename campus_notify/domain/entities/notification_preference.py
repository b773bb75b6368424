"""Domain entity holding a user's notification opt-outs."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .notification import (
    NOTIFICATION_TYPE_ANNOUNCEMENT,
    NOTIFICATION_TYPE_EVENT,
    NOTIFICATION_TYPE_EXAM_REMINDER,
    NOTIFICATION_TYPE_OPPORTUNITY,
    NOTIFICATION_TYPE_TIMETABLE_UPDATE,
)


@dataclass
class NotificationPreference:
    """Per-user switches for automatic notifications.

    A user without a stored preference row receives everything.
    """

    user_id: int
    enable_exam_reminders: bool = True
    enable_event_notifications: bool = True
    enable_opportunity_notifications: bool = True
    enable_timetable_updates: bool = True
    enable_announcements: bool = True
    exam_reminder_1_week: bool = True
    exam_reminder_1_day: bool = True
    exam_reminder_on_day: bool = True
    updated_at: datetime | None = None

    def accepts(self, notification_type: str, *, offset_days: int | None = None) -> bool:
        """Return ``True`` when this user wants notifications of ``notification_type``."""

        if notification_type == NOTIFICATION_TYPE_EXAM_REMINDER:
            if not self.enable_exam_reminders:
                return False
            return self.accepts_exam_offset(offset_days)
        switches = {
            NOTIFICATION_TYPE_EVENT: self.enable_event_notifications,
            NOTIFICATION_TYPE_OPPORTUNITY: self.enable_opportunity_notifications,
            NOTIFICATION_TYPE_TIMETABLE_UPDATE: self.enable_timetable_updates,
            NOTIFICATION_TYPE_ANNOUNCEMENT: self.enable_announcements,
        }
        return switches.get(notification_type, True)

    def accepts_exam_offset(self, offset_days: int | None) -> bool:
        if offset_days is None:
            return True
        if offset_days >= 7:
            return self.exam_reminder_1_week
        if offset_days >= 1:
            return self.exam_reminder_1_day
        return self.exam_reminder_on_day


__all__ = ["NotificationPreference"]
