"""Domain entity representing a per-recipient delivery record."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .notification import Notification


@dataclass
class Delivery:
    """Read and dismiss state of one notification for one recipient."""

    id: int | None
    notification_id: int
    user_id: int
    is_read: bool = False
    read_at: datetime | None = None
    is_dismissed: bool = False
    dismissed_at: datetime | None = None
    created_at: datetime | None = None


@dataclass
class UserNotification:
    """A notification as seen from one recipient's inbox."""

    notification: Notification
    delivery: Delivery


__all__ = ["Delivery", "UserNotification"]
