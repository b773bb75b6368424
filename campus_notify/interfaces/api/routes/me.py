"""Recipient endpoints: inbox, unread badge, read/dismiss and preferences."""

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from campus_notify.application.use_cases.notifications import (
    get_preferences,
    get_unread_count,
    list_user_notifications,
    mark_all_read as mark_all_read_uc,
    mark_dismissed,
    mark_read,
    update_preferences,
)
from campus_notify.domain.entities import (
    DirectoryUser,
    NotificationPreference,
    UserNotification,
)
from campus_notify.infrastructure.database import get_db
from campus_notify.interfaces.api.dependencies import get_current_active_user
from campus_notify.interfaces.api.schemas import (
    MarkAllReadResponse,
    NotificationPreferenceRead,
    NotificationPreferenceUpdate,
    UnreadCountRead,
    UserNotificationRead,
)

router = APIRouter(prefix="/me", tags=["inbox"])


def _to_read_model(item: UserNotification) -> UserNotificationRead:
    notification = item.notification
    delivery = item.delivery
    return UserNotificationRead(
        id=notification.id or 0,
        title=notification.title,
        message=notification.message,
        type=notification.type,
        priority=notification.priority,
        metadata=notification.metadata or {},
        related_resource_type=notification.related_resource_type,
        related_resource_id=notification.related_resource_id,
        created_at=notification.created_at,
        expires_at=notification.expires_at,
        is_read=delivery.is_read,
        read_at=delivery.read_at,
        is_dismissed=delivery.is_dismissed,
        dismissed_at=delivery.dismissed_at,
    )


def _preference_to_read_model(preference: NotificationPreference) -> NotificationPreferenceRead:
    return NotificationPreferenceRead.model_validate(preference)


@router.get("/notifications", response_model=list[UserNotificationRead])
def list_my_notifications(
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    include_read: bool = True,
    include_dismissed: bool = False,
    include_expired: bool = False,
    db: Session = Depends(get_db),
    current_user: DirectoryUser = Depends(get_current_active_user),
):
    """Return the caller's notifications, newest first."""

    items = list_user_notifications(
        db,
        user_id=current_user.id,
        skip=skip,
        limit=limit,
        include_read=include_read,
        include_dismissed=include_dismissed,
        include_expired=include_expired,
    )
    return [_to_read_model(item) for item in items]


@router.get("/notifications/unread-count", response_model=UnreadCountRead)
def read_unread_count(
    db: Session = Depends(get_db),
    current_user: DirectoryUser = Depends(get_current_active_user),
):
    return UnreadCountRead(unread_count=get_unread_count(db, user_id=current_user.id))


@router.post("/notifications/read-all", response_model=MarkAllReadResponse)
def mark_all_notifications_read(
    db: Session = Depends(get_db),
    current_user: DirectoryUser = Depends(get_current_active_user),
):
    return MarkAllReadResponse(updated=mark_all_read_uc(db, user_id=current_user.id))


@router.post("/notifications/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
def mark_notification_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: DirectoryUser = Depends(get_current_active_user),
):
    """Mark a notification as read. Repeating the call changes nothing."""

    mark_read(db, notification_id=notification_id, user_id=current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/notifications/{notification_id}/dismiss", status_code=status.HTTP_204_NO_CONTENT
)
def dismiss_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: DirectoryUser = Depends(get_current_active_user),
):
    mark_dismissed(db, notification_id=notification_id, user_id=current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/notification-preferences", response_model=NotificationPreferenceRead)
def read_preferences(
    db: Session = Depends(get_db),
    current_user: DirectoryUser = Depends(get_current_active_user),
):
    return _preference_to_read_model(get_preferences(db, user_id=current_user.id))


@router.put("/notification-preferences", response_model=NotificationPreferenceRead)
def replace_preferences(
    preferences_in: NotificationPreferenceUpdate,
    db: Session = Depends(get_db),
    current_user: DirectoryUser = Depends(get_current_active_user),
):
    """Update the switches present in the body; omitted ones keep their value."""

    try:
        preference = update_preferences(
            db,
            user_id=current_user.id,
            **preferences_in.model_dump(exclude_none=True),
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _preference_to_read_model(preference)
