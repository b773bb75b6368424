"""Opt-out switches applied to system-generated notifications."""

from __future__ import annotations

from datetime import date

import pytest

from campus_notify.application.use_cases.notifications import (
    get_preferences,
    notify_event_published,
    publish_notification,
    update_preferences,
)
from campus_notify.domain.entities import PublishedEvent, TargetingSpec
from campus_notify.infrastructure.repositories import DeliveryRepository


def test_defaults_accept_everything(session, make_user) -> None:
    user = make_user()

    preference = get_preferences(session, user_id=user.id)

    assert preference.enable_event_notifications is True
    assert preference.exam_reminder_on_day is True
    assert preference.updated_at is None


def test_update_keeps_unmentioned_switches(session, make_user) -> None:
    user = make_user()

    update_preferences(session, user_id=user.id, enable_event_notifications=False)
    updated = update_preferences(session, user_id=user.id, exam_reminder_1_week=False)

    assert updated.enable_event_notifications is False
    assert updated.exam_reminder_1_week is False
    assert updated.enable_opportunity_notifications is True


def test_unknown_switch_is_rejected(session, make_user) -> None:
    user = make_user()

    with pytest.raises(ValueError):
        update_preferences(session, user_id=user.id, enable_everything=True)


def test_opted_out_users_skip_system_notifications(session, make_user) -> None:
    keen = make_user()
    muted = make_user()
    update_preferences(session, user_id=muted.id, enable_event_notifications=False)

    notification = notify_event_published(
        session,
        event=PublishedEvent(id="evt-1", title="Hackathon", event_date=date(2099, 5, 1)),
    )

    recipients = DeliveryRepository(session).list_user_ids(notification.id)
    assert recipients == {keen.id}


def test_admin_notifications_ignore_preferences(session, make_user) -> None:
    admin = make_user(is_admin=True)
    muted = make_user()
    update_preferences(session, user_id=muted.id, enable_event_notifications=False)

    notification, _ = publish_notification(
        session,
        title="Cultural fest",
        message="Join us on the main lawn.",
        notification_type="event",
        targeting=TargetingSpec.everyone(),
        created_by=admin.id,
    )

    assert muted.id in DeliveryRepository(session).list_user_ids(notification.id)
