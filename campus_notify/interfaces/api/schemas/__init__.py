from .domain_event import (
    DomainEventAccepted,
    EventPublishedPayload,
    ExamReminderRunRead,
    OpportunityPublishedPayload,
    TimetableChangedPayload,
    UserRegisteredPayload,
)
from .notification import (
    FanOutRead,
    MarkAllReadResponse,
    NotificationCreate,
    NotificationRead,
    NotificationStatsRead,
    TargetingSchema,
    UnreadCountRead,
    UserNotificationRead,
)
from .preference import NotificationPreferenceRead, NotificationPreferenceUpdate

__all__ = [
    "DomainEventAccepted",
    "EventPublishedPayload",
    "ExamReminderRunRead",
    "OpportunityPublishedPayload",
    "TimetableChangedPayload",
    "UserRegisteredPayload",
    "FanOutRead",
    "MarkAllReadResponse",
    "NotificationCreate",
    "NotificationRead",
    "NotificationStatsRead",
    "TargetingSchema",
    "UnreadCountRead",
    "UserNotificationRead",
    "NotificationPreferenceRead",
    "NotificationPreferenceUpdate",
]
