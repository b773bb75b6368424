"""Administrative endpoints to compose, inspect and delete notifications."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from campus_notify.application.use_cases.notifications import (
    AudienceResolutionError,
    DuplicateNotificationError,
    NotificationNotFoundError,
    NotificationValidationError,
    delete_notification as delete_notification_uc,
    deliver_notification as deliver_notification_uc,
    get_notification as get_notification_uc,
    get_notification_stats as get_notification_stats_uc,
    list_notifications as list_notifications_uc,
    publish_notification,
)
from campus_notify.domain.entities import DirectoryUser, Notification, TargetingSpec
from campus_notify.infrastructure.database import get_db
from campus_notify.interfaces.api.dependencies import require_admin
from campus_notify.interfaces.api.schemas import (
    FanOutRead,
    NotificationCreate,
    NotificationRead,
    NotificationStatsRead,
    TargetingSchema,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)


def targeting_to_schema(targeting: TargetingSpec) -> TargetingSchema:
    return TargetingSchema(
        all_users=targeting.all_users,
        branch_ids=sorted(targeting.branch_ids),
        semesters=sorted(targeting.semesters),
        years=sorted(targeting.years),
        user_ids=sorted(targeting.user_ids),
    )


def _to_read_model(notification: Notification) -> NotificationRead:
    return NotificationRead(
        id=notification.id or 0,
        title=notification.title,
        message=notification.message,
        type=notification.type,
        priority=notification.priority,
        targeting=targeting_to_schema(notification.targeting),
        scheduled_for=notification.scheduled_for,
        expires_at=notification.expires_at,
        related_resource_type=notification.related_resource_type,
        related_resource_id=notification.related_resource_id,
        metadata=notification.metadata or {},
        dedup_key=notification.dedup_key,
        created_by=notification.created_by,
        created_at=notification.created_at,
        delivered_at=notification.delivered_at,
        send_count=notification.send_count,
        is_sent=notification.is_sent,
    )


def _not_found(exc: NotificationNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


@router.post("/", response_model=NotificationRead, status_code=status.HTTP_201_CREATED)
def create_notification(
    notification_in: NotificationCreate,
    db: Session = Depends(get_db),
    current_user: DirectoryUser = Depends(require_admin),
):
    """Create a notification and deliver it to its audience."""

    targeting = notification_in.targeting
    try:
        notification, result = publish_notification(
            db,
            title=notification_in.title,
            message=notification_in.message,
            notification_type=notification_in.type,
            priority=notification_in.priority,
            targeting=TargetingSpec.build(
                all_users=targeting.all_users,
                branch_ids=targeting.branch_ids,
                semesters=targeting.semesters,
                years=targeting.years,
                user_ids=targeting.user_ids,
            ),
            scheduled_for=notification_in.scheduled_for,
            expires_at=notification_in.expires_at,
            related_resource_type=notification_in.related_resource_type,
            related_resource_id=notification_in.related_resource_id,
            metadata=notification_in.metadata,
            dedup_key=notification_in.dedup_key or None,
            created_by=current_user.id,
        )
    except DuplicateNotificationError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except NotificationValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except AudienceResolutionError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc

    if result.aborted:
        logger.warning(
            "Notification %s was removed while it was being sent", result.notification_id
        )
    return _to_read_model(notification)


@router.get("/", response_model=list[NotificationRead])
def list_notifications(
    type: str | None = Query(None, description="Only notifications of this type."),
    priority: str | None = Query(None),
    search: str | None = Query(None, description="Case-insensitive title/message match."),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
    _: DirectoryUser = Depends(require_admin),
):
    """Return notifications newest first with their send counts."""

    notifications = list_notifications_uc(
        db,
        notification_type=type,
        priority=priority,
        search=search,
        skip=skip,
        limit=limit,
    )
    return [_to_read_model(notification) for notification in notifications]


@router.get("/stats", response_model=NotificationStatsRead)
def read_notification_stats(
    db: Session = Depends(get_db),
    _: DirectoryUser = Depends(require_admin),
):
    stats = get_notification_stats_uc(db)
    return NotificationStatsRead(
        total_notifications=stats.total_notifications,
        sent_notifications=stats.sent_notifications,
        pending_notifications=stats.pending_notifications,
        total_recipients=stats.total_recipients,
    )


@router.get("/{notification_id}", response_model=NotificationRead)
def read_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    _: DirectoryUser = Depends(require_admin),
):
    try:
        notification = get_notification_uc(db, notification_id)
    except NotificationNotFoundError as exc:
        raise _not_found(exc) from exc
    return _to_read_model(notification)


@router.post("/{notification_id}/deliver", response_model=FanOutRead)
def deliver_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    _: DirectoryUser = Depends(require_admin),
):
    """Resume an unfinished fan-out; a completed one is left untouched."""

    try:
        result = deliver_notification_uc(db, notification_id)
    except NotificationNotFoundError as exc:
        raise _not_found(exc) from exc
    except AudienceResolutionError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    return FanOutRead(
        notification_id=result.notification_id,
        audience_size=result.audience_size,
        created=result.created,
        send_count=result.send_count,
        aborted=result.aborted,
    )


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    _: DirectoryUser = Depends(require_admin),
):
    """Delete a notification together with every delivery record."""

    try:
        delete_notification_uc(db, notification_id)
    except NotificationNotFoundError as exc:
        raise _not_found(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
