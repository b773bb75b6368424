"""Domain entities exposed by the application."""

from .delivery import Delivery, UserNotification
from .domain_events import (
    PublishedEvent,
    PublishedOpportunity,
    RegisteredUser,
    TimetableChange,
)
from .exam import Exam
from .notification import (
    NOTIFICATION_PRIORITIES,
    NOTIFICATION_TYPE_ANNOUNCEMENT,
    NOTIFICATION_TYPE_CUSTOM,
    NOTIFICATION_TYPE_EVENT,
    NOTIFICATION_TYPE_EXAM_REMINDER,
    NOTIFICATION_TYPE_OPPORTUNITY,
    NOTIFICATION_TYPE_TIMETABLE_UPDATE,
    NOTIFICATION_TYPES,
    PRIORITY_HIGH,
    PRIORITY_LOW,
    PRIORITY_NORMAL,
    PRIORITY_URGENT,
    Notification,
    NotificationStats,
    TargetingSpec,
)
from .notification_preference import NotificationPreference
from .user import DirectoryUser

__all__ = [
    "Delivery",
    "UserNotification",
    "PublishedEvent",
    "PublishedOpportunity",
    "RegisteredUser",
    "TimetableChange",
    "Exam",
    "Notification",
    "NotificationStats",
    "TargetingSpec",
    "NotificationPreference",
    "DirectoryUser",
    "NOTIFICATION_TYPES",
    "NOTIFICATION_TYPE_ANNOUNCEMENT",
    "NOTIFICATION_TYPE_CUSTOM",
    "NOTIFICATION_TYPE_EVENT",
    "NOTIFICATION_TYPE_EXAM_REMINDER",
    "NOTIFICATION_TYPE_OPPORTUNITY",
    "NOTIFICATION_TYPE_TIMETABLE_UPDATE",
    "NOTIFICATION_PRIORITIES",
    "PRIORITY_LOW",
    "PRIORITY_NORMAL",
    "PRIORITY_HIGH",
    "PRIORITY_URGENT",
]
