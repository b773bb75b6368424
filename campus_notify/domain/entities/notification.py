"""Domain entities describing notifications and their audience."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

NOTIFICATION_TYPE_CUSTOM = "custom"
NOTIFICATION_TYPE_ANNOUNCEMENT = "announcement"
NOTIFICATION_TYPE_EXAM_REMINDER = "exam_reminder"
NOTIFICATION_TYPE_EVENT = "event"
NOTIFICATION_TYPE_OPPORTUNITY = "opportunity"
NOTIFICATION_TYPE_TIMETABLE_UPDATE = "timetable_update"

NOTIFICATION_TYPES = (
    NOTIFICATION_TYPE_CUSTOM,
    NOTIFICATION_TYPE_ANNOUNCEMENT,
    NOTIFICATION_TYPE_EXAM_REMINDER,
    NOTIFICATION_TYPE_EVENT,
    NOTIFICATION_TYPE_OPPORTUNITY,
    NOTIFICATION_TYPE_TIMETABLE_UPDATE,
)

PRIORITY_LOW = "low"
PRIORITY_NORMAL = "normal"
PRIORITY_HIGH = "high"
PRIORITY_URGENT = "urgent"

NOTIFICATION_PRIORITIES = (PRIORITY_LOW, PRIORITY_NORMAL, PRIORITY_HIGH, PRIORITY_URGENT)


@dataclass(frozen=True)
class TargetingSpec:
    """Audience selection attached to a notification.

    ``all_users`` wins over every other field. Otherwise the branch, semester
    and year sets are AND-ed together and ``user_ids`` is unioned with the
    result. Empty sets mean "no filter of that kind".
    """

    all_users: bool = False
    branch_ids: frozenset[str] = frozenset()
    semesters: frozenset[int] = frozenset()
    years: frozenset[int] = frozenset()
    user_ids: frozenset[int] = frozenset()

    @classmethod
    def everyone(cls) -> "TargetingSpec":
        return cls(all_users=True)

    @classmethod
    def build(
        cls,
        *,
        all_users: bool = False,
        branch_ids=None,
        semesters=None,
        years=None,
        user_ids=None,
    ) -> "TargetingSpec":
        """Create a spec from any iterables, dropping ``None`` entries."""

        return cls(
            all_users=bool(all_users),
            branch_ids=frozenset(str(b) for b in branch_ids or () if b is not None),
            semesters=frozenset(int(s) for s in semesters or () if s is not None),
            years=frozenset(int(y) for y in years or () if y is not None),
            user_ids=frozenset(int(u) for u in user_ids or () if u is not None),
        )

    @property
    def has_filters(self) -> bool:
        return bool(self.branch_ids or self.semesters or self.years)

    @property
    def is_empty(self) -> bool:
        return not self.all_users and not self.has_filters and not self.user_ids


@dataclass
class Notification:
    """Content record shared by every recipient of a notification."""

    id: int | None
    title: str
    message: str
    type: str
    priority: str
    targeting: TargetingSpec
    scheduled_for: datetime | None = None
    expires_at: datetime | None = None
    related_resource_type: str | None = None
    related_resource_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    dedup_key: str | None = None
    created_by: int | None = None
    created_at: datetime | None = None
    delivered_at: datetime | None = None
    recipients: frozenset[int] = frozenset()
    send_count: int = 0

    @property
    def is_sent(self) -> bool:
        return self.send_count > 0

    @property
    def is_system_generated(self) -> bool:
        return self.created_by is None


@dataclass(frozen=True)
class NotificationStats:
    """Aggregated figures shown on the admin dashboard."""

    total_notifications: int
    sent_notifications: int
    pending_notifications: int
    total_recipients: int


__all__ = [
    "Notification",
    "NotificationStats",
    "TargetingSpec",
    "NOTIFICATION_TYPES",
    "NOTIFICATION_TYPE_CUSTOM",
    "NOTIFICATION_TYPE_ANNOUNCEMENT",
    "NOTIFICATION_TYPE_EXAM_REMINDER",
    "NOTIFICATION_TYPE_EVENT",
    "NOTIFICATION_TYPE_OPPORTUNITY",
    "NOTIFICATION_TYPE_TIMETABLE_UPDATE",
    "NOTIFICATION_PRIORITIES",
    "PRIORITY_LOW",
    "PRIORITY_NORMAL",
    "PRIORITY_HIGH",
    "PRIORITY_URGENT",
]
