"""Use cases for reading and updating notification preferences."""

from dataclasses import fields, replace

from sqlalchemy.orm import Session

from campus_notify.domain.entities import NotificationPreference
from campus_notify.infrastructure.repositories import NotificationPreferenceRepository

_EDITABLE = {
    field.name
    for field in fields(NotificationPreference)
    if field.name not in {"user_id", "updated_at"}
}


def get_preferences(session: Session, *, user_id: int) -> NotificationPreference:
    """Return the stored preferences or the all-enabled default."""

    stored = NotificationPreferenceRepository(session).get(user_id)
    return stored or NotificationPreference(user_id=user_id)


def update_preferences(
    session: Session, *, user_id: int, **changes: bool
) -> NotificationPreference:
    unknown = set(changes) - _EDITABLE
    if unknown:
        raise ValueError(f"Unknown preference fields: {sorted(unknown)}")
    current = get_preferences(session, user_id=user_id)
    updated = replace(current, **{name: bool(value) for name, value in changes.items()})
    return NotificationPreferenceRepository(session).save(updated)


__all__ = ["get_preferences", "update_preferences"]
