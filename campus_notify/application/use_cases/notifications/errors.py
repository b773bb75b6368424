"""Exceptions raised by the notification use cases."""

from __future__ import annotations


class NotificationValidationError(ValueError):
    """Content or targeting was rejected before anything was written."""


class DuplicateNotificationError(ValueError):
    """A notification with the same deduplication key already exists."""

    def __init__(self, dedup_key: str, existing_id: int | None) -> None:
        super().__init__(f"Notification '{dedup_key}' already exists")
        self.dedup_key = dedup_key
        self.existing_id = existing_id


class NotificationNotFoundError(LookupError):
    """The requested notification does not exist."""

    def __init__(self, notification_id: int) -> None:
        super().__init__(f"Notification with id {notification_id} not found")
        self.notification_id = notification_id


class AudienceResolutionError(RuntimeError):
    """The user directory could not be queried."""


__all__ = [
    "AudienceResolutionError",
    "DuplicateNotificationError",
    "NotificationNotFoundError",
    "NotificationValidationError",
]
