"""Notification preference schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class NotificationPreferenceRead(BaseModel):
    user_id: int
    enable_exam_reminders: bool
    enable_event_notifications: bool
    enable_opportunity_notifications: bool
    enable_timetable_updates: bool
    enable_announcements: bool
    exam_reminder_1_week: bool
    exam_reminder_1_day: bool
    exam_reminder_on_day: bool
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class NotificationPreferenceUpdate(BaseModel):
    enable_exam_reminders: bool | None = None
    enable_event_notifications: bool | None = None
    enable_opportunity_notifications: bool | None = None
    enable_timetable_updates: bool | None = None
    enable_announcements: bool | None = None
    exam_reminder_1_week: bool | None = None
    exam_reminder_1_day: bool | None = None
    exam_reminder_on_day: bool | None = None

    model_config = ConfigDict(extra="forbid")
