"""Delivery fan-out: exactly-once records, resumption and deletion."""

from __future__ import annotations

import pytest

from campus_notify.application.use_cases.notifications import (
    DuplicateNotificationError,
    NotificationNotFoundError,
    NotificationValidationError,
    create_notification,
    delete_notification,
    deliver_notification,
    fan_out,
    publish_notification,
)
from campus_notify.domain.entities import TargetingSpec
from campus_notify.infrastructure import database
from campus_notify.infrastructure.models import DeliveryModel
from campus_notify.infrastructure.repositories import (
    DeliveryRepository,
    NotificationRepository,
)


def _create(session, targeting: TargetingSpec, **overrides):
    fields = {
        "title": "Library closed",
        "message": "The library is closed on Friday.",
        "notification_type": "announcement",
        "targeting": targeting,
    }
    fields.update(overrides)
    return create_notification(session, **fields)


def test_send_count_matches_the_resolved_audience(session, make_user) -> None:
    for _ in range(40):
        make_user(branch_id="CSE", semester=3)
    for _ in range(10):
        make_user(branch_id="ECE", semester=1)

    notification, result = publish_notification(
        session,
        title="Lab schedule",
        message="Lab sessions move to the afternoon.",
        notification_type="announcement",
        targeting=TargetingSpec.build(branch_ids=["CSE"], semesters=[3]),
    )

    assert result.created == 40
    assert notification.send_count == 40
    assert notification.is_sent is True
    assert notification.delivered_at is not None


def test_repeated_fan_out_creates_no_duplicates(session, make_user) -> None:
    users = [make_user() for _ in range(5)]
    notification = _create(session, TargetingSpec.everyone())
    audience = {user.id for user in users}

    first = fan_out(session, notification.id, audience)
    second = fan_out(session, notification.id, audience)

    assert first.created == 5
    assert second.created == 0
    assert second.send_count == 5
    assert DeliveryRepository(session).list_user_ids(notification.id) == audience


def test_interrupted_fan_out_is_resumed(session, make_user) -> None:
    users = [make_user() for _ in range(6)]
    notification = _create(session, TargetingSpec.everyone())
    fan_out(session, notification.id, [user.id for user in users[:2]])

    result = deliver_notification(session, notification.id, chunk_size=2)

    assert result.created == 4
    assert result.send_count == 6
    assert NotificationRepository(session).get(notification.id).delivered_at is not None


def test_completed_fan_out_keeps_its_recipient_snapshot(session, make_user) -> None:
    make_user()
    notification, _ = publish_notification(
        session,
        title="Holiday",
        message="Campus closed tomorrow.",
        notification_type="announcement",
        targeting=TargetingSpec.everyone(),
    )
    late_joiner = make_user()

    result = deliver_notification(session, notification.id)

    assert result.created == 0
    assert result.send_count == 1
    assert late_joiner.id not in DeliveryRepository(session).list_user_ids(notification.id)


def test_notification_without_recipients_is_stored_as_pending(session) -> None:
    notification, result = publish_notification(
        session,
        title="Quiet",
        message="No one matches.",
        notification_type="announcement",
        targeting=TargetingSpec.build(branch_ids=["CIVIL"]),
    )

    assert result.audience_size == 0
    assert notification.send_count == 0
    assert notification.is_sent is False


def test_delete_removes_every_delivery(session, make_user) -> None:
    for _ in range(3):
        make_user()
    notification, _ = publish_notification(
        session,
        title="Old news",
        message="To be removed.",
        notification_type="announcement",
        targeting=TargetingSpec.everyone(),
    )

    delete_notification(session, notification.id)

    remaining = (
        session.query(DeliveryModel)
        .filter(DeliveryModel.notification_id == notification.id)
        .count()
    )
    assert remaining == 0
    with pytest.raises(NotificationNotFoundError):
        delete_notification(session, notification.id)


def test_fan_out_stops_when_the_notification_is_deleted(
    session, make_user, monkeypatch
) -> None:
    users = [make_user() for _ in range(5)]
    notification = _create(session, TargetingSpec.everyone())
    original = DeliveryRepository.insert_missing

    def insert_then_delete(self, notification_id, user_ids):
        created = original(self, notification_id, user_ids)
        other = database.SessionLocal()
        try:
            NotificationRepository(other).delete(notification_id)
        finally:
            other.close()
        return created

    monkeypatch.setattr(DeliveryRepository, "insert_missing", insert_then_delete)

    result = fan_out(session, notification.id, [user.id for user in users], chunk_size=2)

    assert result.aborted is True
    assert result.created == 2
    assert session.query(DeliveryModel).count() == 0
    assert NotificationRepository(session).get(notification.id) is None


def test_duplicate_dedup_key_is_refused(session, make_user) -> None:
    make_user()
    first = _create(session, TargetingSpec.everyone(), dedup_key="event:42")

    with pytest.raises(DuplicateNotificationError) as excinfo:
        _create(session, TargetingSpec.everyone(), dedup_key="event:42")

    assert excinfo.value.existing_id == first.id


def test_resumed_fan_out_does_not_reach_users_who_joined_later(session, make_user) -> None:
    original = [make_user() for _ in range(4)]
    notification = _create(session, TargetingSpec.everyone())
    fan_out(session, notification.id, [user.id for user in original[:2]])
    late_joiner = make_user()

    result = deliver_notification(session, notification.id)

    recipients = DeliveryRepository(session).list_user_ids(notification.id)
    assert late_joiner.id not in recipients
    assert recipients == {user.id for user in original}
    assert result.send_count == 4


def test_crashed_delivery_resumes_with_the_stored_recipients(
    session, make_user, monkeypatch
) -> None:
    original = [make_user() for _ in range(4)]
    notification = _create(session, TargetingSpec.everyone())
    real_insert = DeliveryRepository.insert_missing
    calls = []

    def crash_on_second_chunk(self, notification_id, user_ids):
        calls.append(list(user_ids))
        if len(calls) == 2:
            raise RuntimeError("worker killed")
        return real_insert(self, notification_id, user_ids)

    monkeypatch.setattr(DeliveryRepository, "insert_missing", crash_on_second_chunk)
    with pytest.raises(RuntimeError):
        deliver_notification(session, notification.id, chunk_size=2)
    monkeypatch.setattr(DeliveryRepository, "insert_missing", real_insert)
    make_user()
    make_user()

    result = deliver_notification(session, notification.id, chunk_size=2)

    assert result.created == 2
    assert DeliveryRepository(session).list_user_ids(notification.id) == {
        user.id for user in original
    }


def test_admins_cannot_use_automatic_dedup_keys(session, make_user) -> None:
    admin = make_user(is_admin=True)

    with pytest.raises(NotificationValidationError):
        _create(
            session,
            TargetingSpec.everyone(),
            dedup_key="exam:1:7",
            created_by=admin.id,
        )

    stored = _create(
        session, TargetingSpec.everyone(), dedup_key="fees:2099", created_by=admin.id
    )
    assert stored.dedup_key == "fees:2099"
