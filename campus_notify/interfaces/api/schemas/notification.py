"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

NotificationTypeLiteral = Literal[
    "custom", "announcement", "exam_reminder", "event", "opportunity", "timetable_update"
]
PriorityLiteral = Literal["low", "normal", "high", "urgent"]


class TargetingSchema(BaseModel):
    """Audience selection; ``all_users`` overrides every other field."""

    all_users: bool = False
    branch_ids: list[str] = Field(default_factory=list)
    semesters: list[int] = Field(default_factory=list)
    years: list[int] = Field(default_factory=list)
    user_ids: list[int] = Field(default_factory=list)


class NotificationCreate(BaseModel):
    title: str = Field(..., max_length=255)
    message: str
    type: NotificationTypeLiteral = "custom"
    priority: PriorityLiteral = "normal"
    targeting: TargetingSchema
    scheduled_for: datetime | None = None
    expires_at: datetime | None = None
    related_resource_type: str | None = Field(default=None, max_length=50)
    related_resource_id: str | None = Field(default=None, max_length=64)
    metadata: dict[str, Any] = Field(default_factory=dict)
    dedup_key: str | None = Field(default=None, max_length=120)


class NotificationRead(BaseModel):
    """Administrative view of a notification with its derived send count."""

    id: int
    title: str
    message: str
    type: str
    priority: str
    targeting: TargetingSchema
    scheduled_for: datetime | None = None
    expires_at: datetime | None = None
    related_resource_type: str | None = None
    related_resource_id: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    dedup_key: str | None = None
    created_by: int | None = None
    created_at: datetime | None = None
    delivered_at: datetime | None = None
    send_count: int = 0
    is_sent: bool = False


class NotificationStatsRead(BaseModel):
    total_notifications: int
    sent_notifications: int
    pending_notifications: int
    total_recipients: int


class FanOutRead(BaseModel):
    notification_id: int
    audience_size: int
    created: int
    send_count: int
    aborted: bool


class UserNotificationRead(BaseModel):
    """A notification as shown in a recipient's inbox."""

    id: int
    title: str
    message: str
    type: str
    priority: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    related_resource_type: str | None = None
    related_resource_id: str | None = None
    created_at: datetime | None = None
    expires_at: datetime | None = None
    is_read: bool
    read_at: datetime | None = None
    is_dismissed: bool
    dismissed_at: datetime | None = None


class UnreadCountRead(BaseModel):
    unread_count: int


class MarkAllReadResponse(BaseModel):
    updated: int


__all__ = [
    "FanOutRead",
    "MarkAllReadResponse",
    "NotificationCreate",
    "NotificationRead",
    "NotificationStatsRead",
    "TargetingSchema",
    "UnreadCountRead",
    "UserNotificationRead",
]
