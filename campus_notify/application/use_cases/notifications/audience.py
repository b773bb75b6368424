"""Audience resolution: turn a targeting specification into recipient ids."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from campus_notify.domain.entities import TargetingSpec
from campus_notify.infrastructure.repositories import (
    NotificationPreferenceRepository,
    UserRepository,
)

from .errors import AudienceResolutionError
from .targeting import validate_targeting

logger = logging.getLogger(__name__)


def resolve_audience(session: Session, targeting: TargetingSpec) -> frozenset[int]:
    """Return the active users selected by ``targeting``.

    ``all_users`` selects the whole directory. Otherwise users must match
    every supplied filter kind (any value within a kind) and explicitly listed
    users are always added. The directory is queried once.
    """

    validate_targeting(targeting)
    try:
        recipients = UserRepository(session).list_ids_matching(targeting)
    except SQLAlchemyError as exc:
        session.rollback()
        raise AudienceResolutionError("User directory is unavailable") from exc
    return frozenset(recipients)


def apply_preferences(
    session: Session,
    audience: Iterable[int],
    *,
    notification_type: str,
    offset_days: int | None = None,
    always_include: Iterable[int] = (),
) -> frozenset[int]:
    """Drop users who opted out of ``notification_type``.

    Users in ``always_include`` are kept regardless of their preferences.
    """

    recipients = set(audience)
    keep = set(always_include)
    try:
        preferences = NotificationPreferenceRepository(session).list_for_users(
            recipients - keep
        )
    except SQLAlchemyError as exc:
        session.rollback()
        raise AudienceResolutionError("Notification preferences are unavailable") from exc

    opted_out = {
        preference.user_id
        for preference in preferences
        if not preference.accepts(notification_type, offset_days=offset_days)
    }
    if opted_out:
        logger.debug(
            "%s users opted out of %s notifications", len(opted_out), notification_type
        )
    return frozenset(recipients - opted_out)


def snapshot_audience(
    session: Session,
    *,
    targeting: TargetingSpec,
    notification_type: str,
    created_by: int | None,
    metadata: dict[str, Any] | None = None,
) -> frozenset[int]:
    """Resolve the final recipient set of a notification about to be stored.

    Opt-out preferences only narrow system-generated notifications
    (``created_by`` is ``None``); explicitly listed users are always kept.
    """

    audience = resolve_audience(session, targeting)
    if created_by is not None:
        return audience
    offset = (metadata or {}).get("days_until")
    return apply_preferences(
        session,
        audience,
        notification_type=notification_type,
        offset_days=int(offset) if offset is not None else None,
        always_include=targeting.user_ids,
    )


__all__ = ["apply_preferences", "resolve_audience", "snapshot_audience"]
