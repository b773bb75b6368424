"""Notification targeting, delivery and read-state use cases."""

from .audience import apply_preferences, resolve_audience, snapshot_audience
from .create_notification import (
    create_notification,
    delete_notification,
    exam_reminder_key,
    get_notification,
)
from .errors import (
    AudienceResolutionError,
    DuplicateNotificationError,
    NotificationNotFoundError,
    NotificationValidationError,
)
from .events import (
    notify_event_published,
    notify_opportunity_published,
    notify_timetable_changed,
    notify_user_registered,
)
from .exam_reminders import ExamReminderRun, run_exam_reminders
from .fan_out import (
    FanOutResult,
    deliver_notification,
    fan_out,
    publish_notification,
    publish_or_resume,
)
from .list_notifications import get_notification_stats, list_notifications
from .preferences import get_preferences, update_preferences
from .read_state import (
    get_unread_count,
    list_user_notifications,
    mark_all_read,
    mark_dismissed,
    mark_read,
)
from .targeting import validate_content, validate_targeting

__all__ = [
    "apply_preferences",
    "resolve_audience",
    "snapshot_audience",
    "create_notification",
    "delete_notification",
    "exam_reminder_key",
    "get_notification",
    "AudienceResolutionError",
    "DuplicateNotificationError",
    "NotificationNotFoundError",
    "NotificationValidationError",
    "notify_event_published",
    "notify_opportunity_published",
    "notify_timetable_changed",
    "notify_user_registered",
    "ExamReminderRun",
    "run_exam_reminders",
    "FanOutResult",
    "deliver_notification",
    "fan_out",
    "publish_notification",
    "publish_or_resume",
    "get_notification_stats",
    "list_notifications",
    "get_preferences",
    "update_preferences",
    "get_unread_count",
    "list_user_notifications",
    "mark_all_read",
    "mark_dismissed",
    "mark_read",
    "validate_content",
    "validate_targeting",
]
