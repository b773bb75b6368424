"""Hooks called by the catalog layer after it publishes content.

Notification delivery is best effort: these endpoints always answer 202 so
the caller's own operation is never failed by a notification problem.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from campus_notify.application.use_cases.notifications import (
    notify_event_published,
    notify_opportunity_published,
    notify_timetable_changed,
    notify_user_registered,
)
from campus_notify.domain.entities import (
    DirectoryUser,
    Notification,
    PublishedEvent,
    PublishedOpportunity,
    RegisteredUser,
    TimetableChange,
)
from campus_notify.infrastructure.database import get_db
from campus_notify.interfaces.api.dependencies import require_admin
from campus_notify.interfaces.api.schemas import (
    DomainEventAccepted,
    EventPublishedPayload,
    OpportunityPublishedPayload,
    TimetableChangedPayload,
    UserRegisteredPayload,
)

router = APIRouter(prefix="/domain-events", tags=["domain-events"])


def _accepted(notification: Notification | None) -> DomainEventAccepted:
    return DomainEventAccepted(
        notification_id=notification.id if notification is not None else None
    )


@router.post(
    "/event-published",
    response_model=DomainEventAccepted,
    status_code=status.HTTP_202_ACCEPTED,
)
def event_published(
    payload: EventPublishedPayload,
    db: Session = Depends(get_db),
    _: DirectoryUser = Depends(require_admin),
):
    event = PublishedEvent(
        id=payload.id,
        title=payload.title,
        event_date=payload.event_date,
        venue=payload.venue,
        target_branches=tuple(payload.target_branches),
        target_semesters=tuple(payload.target_semesters),
        target_years=tuple(payload.target_years),
    )
    return _accepted(notify_event_published(db, event=event))


@router.post(
    "/opportunity-published",
    response_model=DomainEventAccepted,
    status_code=status.HTTP_202_ACCEPTED,
)
def opportunity_published(
    payload: OpportunityPublishedPayload,
    db: Session = Depends(get_db),
    _: DirectoryUser = Depends(require_admin),
):
    opportunity = PublishedOpportunity(
        id=payload.id,
        title=payload.title,
        opportunity_type=payload.type,
        company_name=payload.company_name,
        deadline=payload.deadline,
        target_branches=tuple(payload.target_branches),
        target_semesters=tuple(payload.target_semesters),
        target_years=tuple(payload.target_years),
    )
    return _accepted(notify_opportunity_published(db, opportunity=opportunity))


@router.post(
    "/timetable-changed",
    response_model=DomainEventAccepted,
    status_code=status.HTTP_202_ACCEPTED,
)
def timetable_changed(
    payload: TimetableChangedPayload,
    db: Session = Depends(get_db),
    _: DirectoryUser = Depends(require_admin),
):
    change = TimetableChange(
        id=payload.id,
        branch_id=payload.branch_id,
        semester=payload.semester,
        day_of_week=payload.day_of_week,
        subject_name=payload.subject_name,
    )
    return _accepted(notify_timetable_changed(db, change=change))


@router.post(
    "/user-registered",
    response_model=DomainEventAccepted,
    status_code=status.HTTP_202_ACCEPTED,
)
def user_registered(
    payload: UserRegisteredPayload,
    db: Session = Depends(get_db),
    _: DirectoryUser = Depends(require_admin),
):
    user = RegisteredUser(id=payload.id, name=payload.name)
    return _accepted(notify_user_registered(db, user=user))
