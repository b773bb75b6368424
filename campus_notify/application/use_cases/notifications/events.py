"""Translate domain events from the CRUD layer into notifications.

Each ``notify_*`` helper derives the content and audience from the event
payload and publishes it. Delivery is best effort: any failure is logged and
swallowed so the mutation that raised the event is never affected. Keyed
notifications can be retried by raising the same event again.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, datetime, time, timedelta

from sqlalchemy.orm import Session

from campus_notify.config import get_settings
from campus_notify.domain.entities import (
    NOTIFICATION_TYPE_CUSTOM,
    NOTIFICATION_TYPE_EVENT,
    NOTIFICATION_TYPE_OPPORTUNITY,
    NOTIFICATION_TYPE_TIMETABLE_UPDATE,
    PRIORITY_HIGH,
    PRIORITY_NORMAL,
    Notification,
    PublishedEvent,
    PublishedOpportunity,
    RegisteredUser,
    TargetingSpec,
    TimetableChange,
)
from campus_notify.utils import ensure_utc, get_app_timezone, now_utc

from .fan_out import publish_notification, publish_or_resume

logger = logging.getLogger(__name__)

_URGENT_DEADLINE_WINDOW = timedelta(days=7)


def start_of_day(day: date) -> datetime:
    """Return midnight of ``day`` in the application timezone."""

    return datetime.combine(day, time.min, tzinfo=get_app_timezone())


def _already_closed(expires_at: datetime | None, now: datetime) -> bool:
    return expires_at is not None and expires_at <= now


def audience_from_restrictions(
    branches=(), semesters=(), years=()
) -> TargetingSpec:
    """Everyone when the source declares no restriction, otherwise its filters."""

    targeting = TargetingSpec.build(branch_ids=branches, semesters=semesters, years=years)
    if not targeting.has_filters:
        return TargetingSpec.everyone()
    return targeting


def _best_effort(
    session: Session, kind: str, source_id, action: Callable[[], Notification]
) -> Notification | None:
    try:
        return action()
    except Exception:
        session.rollback()
        logger.exception("Could not deliver %s notification for %s", kind, source_id)
        return None


def notify_event_published(
    session: Session, *, event: PublishedEvent, now: datetime | None = None
) -> Notification | None:
    """Announce a newly published campus event to its audience.

    The notification expires at the start of the day after the event; an
    event that is already over is not announced.
    """

    now = now or now_utc()
    when = f" on {event.event_date.isoformat()}" if event.event_date else ""
    expires_at = (
        start_of_day(event.event_date + timedelta(days=1)) if event.event_date else None
    )
    if _already_closed(expires_at, now):
        logger.info("Event %s is already over; no notification sent", event.id)
        return None

    def action() -> Notification:
        notification, _ = publish_or_resume(
            session,
            title=f"New Event: {event.title}",
            message=f"A new event has been added. Check it out: {event.title}{when}",
            notification_type=NOTIFICATION_TYPE_EVENT,
            priority=PRIORITY_NORMAL,
            targeting=audience_from_restrictions(
                event.target_branches, event.target_semesters, event.target_years
            ),
            scheduled_for=now,
            expires_at=expires_at,
            related_resource_type="event",
            related_resource_id=event.id,
            metadata={
                "event_id": event.id,
                "event_date": event.event_date.isoformat() if event.event_date else None,
                "venue": event.venue,
            },
            dedup_key=f"event:{event.id}",
        )
        return notification

    return _best_effort(session, "event", event.id, action)


def notify_opportunity_published(
    session: Session, *, opportunity: PublishedOpportunity, now: datetime | None = None
) -> Notification | None:
    """Announce a new opportunity to the students eligible for it.

    The notification expires at the deadline; nothing is sent once the
    deadline has passed.
    """

    now = now or now_utc()
    deadline = ensure_utc(opportunity.deadline)
    if _already_closed(deadline, now):
        logger.info(
            "Opportunity %s is past its deadline; no notification sent", opportunity.id
        )
        return None
    company = opportunity.company_name or "a company"
    if deadline is not None:
        closing = f"Deadline: {deadline.astimezone(get_app_timezone()).date().isoformat()}"
    else:
        closing = "Check it out now!"
    priority = (
        PRIORITY_HIGH
        if deadline is not None and deadline < now + _URGENT_DEADLINE_WINDOW
        else PRIORITY_NORMAL
    )
    kind = opportunity.opportunity_type or "opportunity"

    def action() -> Notification:
        notification, _ = publish_or_resume(
            session,
            title=f"New {kind.title()}: {opportunity.title}",
            message=(
                f"A new {kind.lower()} opportunity has been posted at {company}. {closing}"
            ),
            notification_type=NOTIFICATION_TYPE_OPPORTUNITY,
            priority=priority,
            targeting=audience_from_restrictions(
                opportunity.target_branches,
                opportunity.target_semesters,
                opportunity.target_years,
            ),
            scheduled_for=now,
            expires_at=deadline,
            related_resource_type="opportunity",
            related_resource_id=opportunity.id,
            metadata={
                "opportunity_id": opportunity.id,
                "type": kind,
                "company": opportunity.company_name,
            },
            dedup_key=f"opportunity:{opportunity.id}",
        )
        return notification

    return _best_effort(session, "opportunity", opportunity.id, action)


def notify_timetable_changed(
    session: Session, *, change: TimetableChange, now: datetime | None = None
) -> Notification | None:
    """Tell the affected branch and semester that their timetable changed.

    Every change produces a new notification; timetable updates carry no
    deduplication key.
    """

    now = now or now_utc()
    settings = get_settings()
    detail = ""
    if change.subject_name and change.day_of_week:
        detail = f" ({change.subject_name} on {change.day_of_week})"

    def action() -> Notification:
        notification, _ = publish_notification(
            session,
            title="Timetable Updated",
            message=(
                "Your timetable has been updated"
                f"{detail}. Please check for any changes in schedule."
            ),
            notification_type=NOTIFICATION_TYPE_TIMETABLE_UPDATE,
            priority=PRIORITY_NORMAL,
            targeting=TargetingSpec.build(
                branch_ids=[change.branch_id], semesters=[change.semester]
            ),
            scheduled_for=now,
            expires_at=now + timedelta(days=settings.timetable_expiry_days)
            if settings.timetable_expiry_days
            else None,
            related_resource_type="timetable",
            related_resource_id=change.id,
            metadata={"branch_id": change.branch_id, "semester": change.semester},
        )
        return notification

    return _best_effort(session, "timetable", change.id, action)


def notify_user_registered(
    session: Session, *, user: RegisteredUser, now: datetime | None = None
) -> Notification | None:
    """Send the welcome message to a newly registered user only."""

    now = now or now_utc()
    settings = get_settings()

    def action() -> Notification:
        notification, _ = publish_or_resume(
            session,
            title="Welcome to Campus Notify!",
            message=(
                f"Welcome {user.name}! You can now access notes, timetables, events, "
                "and opportunities. Update your profile to get personalized content "
                "for your branch and semester."
            ),
            notification_type=NOTIFICATION_TYPE_CUSTOM,
            priority=PRIORITY_NORMAL,
            targeting=TargetingSpec.build(user_ids=[user.id]),
            scheduled_for=now,
            expires_at=now + timedelta(days=settings.welcome_expiry_days)
            if settings.welcome_expiry_days
            else None,
            related_resource_type="user",
            related_resource_id=user.id,
            metadata={"user_id": user.id},
            dedup_key=f"welcome:{user.id}",
        )
        return notification

    return _best_effort(session, "welcome", user.id, action)


__all__ = [
    "audience_from_restrictions",
    "notify_event_published",
    "notify_opportunity_published",
    "notify_timetable_changed",
    "notify_user_registered",
    "start_of_day",
]
