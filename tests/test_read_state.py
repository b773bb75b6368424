"""Per-recipient read and dismiss state and the unread counter."""

from __future__ import annotations

from datetime import timedelta

from campus_notify.application.use_cases.notifications import (
    get_unread_count,
    list_user_notifications,
    mark_all_read,
    mark_dismissed,
    mark_read,
    publish_notification,
)
from campus_notify.domain.entities import TargetingSpec
from campus_notify.infrastructure.repositories import DeliveryRepository
from campus_notify.utils import now_utc


def _publish(session, title: str = "Notice", **overrides):
    fields = {
        "title": title,
        "message": f"{title} body",
        "notification_type": "announcement",
        "targeting": TargetingSpec.everyone(),
    }
    fields.update(overrides)
    notification, _ = publish_notification(session, **fields)
    return notification


def test_mark_read_is_idempotent(session, make_user) -> None:
    user = make_user()
    notification = _publish(session)
    assert get_unread_count(session, user_id=user.id) == 1

    mark_read(session, notification_id=notification.id, user_id=user.id)
    first = DeliveryRepository(session).get(notification.id, user.id)
    mark_read(session, notification_id=notification.id, user_id=user.id)
    second = DeliveryRepository(session).get(notification.id, user.id)

    assert first.is_read is True
    assert second.read_at == first.read_at
    assert get_unread_count(session, user_id=user.id) == 0


def test_read_state_is_per_recipient(session, make_user) -> None:
    reader = make_user()
    other = make_user()
    notification = _publish(session)

    mark_read(session, notification_id=notification.id, user_id=reader.id)

    assert get_unread_count(session, user_id=reader.id) == 0
    assert get_unread_count(session, user_id=other.id) == 1


def test_marking_a_notification_the_user_never_received_is_a_no_op(
    session, make_user
) -> None:
    recipient = make_user(branch_id="CSE")
    outsider = make_user(branch_id="ECE")
    notification = _publish(session, targeting=TargetingSpec.build(branch_ids=["CSE"]))

    mark_read(session, notification_id=notification.id, user_id=outsider.id)
    mark_dismissed(session, notification_id=notification.id, user_id=outsider.id)

    assert DeliveryRepository(session).get(notification.id, outsider.id) is None
    assert get_unread_count(session, user_id=recipient.id) == 1


def test_expired_notifications_are_not_counted(session, make_user) -> None:
    user = make_user()
    now = now_utc()
    _publish(session, title="Current")
    _publish(
        session,
        title="Stale",
        scheduled_for=now - timedelta(days=2),
        expires_at=now - timedelta(days=1),
    )

    assert get_unread_count(session, user_id=user.id) == 1
    titles = [item.notification.title for item in list_user_notifications(session, user_id=user.id)]
    assert titles == ["Current"]
    everything = list_user_notifications(session, user_id=user.id, include_expired=True)
    assert len(everything) == 2


def test_dismiss_does_not_mark_read(session, make_user) -> None:
    user = make_user()
    notification = _publish(session)

    mark_dismissed(session, notification_id=notification.id, user_id=user.id)

    delivery = DeliveryRepository(session).get(notification.id, user.id)
    assert delivery.is_dismissed is True
    assert delivery.dismissed_at is not None
    assert delivery.is_read is False
    assert get_unread_count(session, user_id=user.id) == 1
    assert list_user_notifications(session, user_id=user.id) == []
    assert len(list_user_notifications(session, user_id=user.id, include_dismissed=True)) == 1


def test_mark_all_read(session, make_user) -> None:
    user = make_user()
    for title in ("One", "Two", "Three"):
        _publish(session, title=title)

    assert mark_all_read(session, user_id=user.id) == 3
    assert mark_all_read(session, user_id=user.id) == 0
    assert get_unread_count(session, user_id=user.id) == 0


def test_inbox_is_newest_first_and_paginated(session, make_user) -> None:
    user = make_user()
    for title in ("First", "Second", "Third"):
        _publish(session, title=title)

    page = list_user_notifications(session, user_id=user.id, limit=2)
    rest = list_user_notifications(session, user_id=user.id, skip=2, limit=2)

    assert [item.notification.title for item in page] == ["Third", "Second"]
    assert [item.notification.title for item in rest] == ["First"]
    unread_only = list_user_notifications(session, user_id=user.id, include_read=False)
    assert len(unread_only) == 3
