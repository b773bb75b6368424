"""Daily exam reminder sweep."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from campus_notify.application.use_cases.notifications import (
    run_exam_reminders,
    update_preferences,
)
from campus_notify.application.use_cases.notifications import exam_reminders
from campus_notify.domain.entities import Exam
from campus_notify.infrastructure.repositories import (
    DeliveryRepository,
    ExamRepository,
    NotificationRepository,
)

EXAM_DAY = date(2099, 3, 11)


@pytest.fixture()
def exam(session) -> Exam:
    return ExamRepository(session).create(
        Exam(
            id=None,
            subject_name="Data Structures",
            subject_code="CS301",
            exam_type="Mid-term",
            branch_id="CSE",
            semester=3,
            exam_date=EXAM_DAY,
            room_number="B-204",
        )
    )


def test_reminders_follow_the_calendar(session, make_user, exam) -> None:
    students = [make_user(branch_id="CSE", semester=3) for _ in range(3)]
    make_user(branch_id="CSE", semester=5)

    week_before = run_exam_reminders(session, today=EXAM_DAY - timedelta(days=7))
    assert len(week_before.created) == 1
    reminder = NotificationRepository(session).get(week_before.created[0])
    assert reminder.title == "Exam in 1 Week: CS301"
    assert reminder.priority == "low"
    assert reminder.dedup_key == f"exam:{exam.id}:7"
    assert reminder.send_count == len(students)

    quiet_day = run_exam_reminders(session, today=EXAM_DAY - timedelta(days=6))
    assert quiet_day.created == []
    assert quiet_day.already_sent == 0

    day_before = run_exam_reminders(session, today=EXAM_DAY - timedelta(days=1))
    assert len(day_before.created) == 1
    tomorrow = NotificationRepository(session).get(day_before.created[0])
    assert tomorrow.title == "Exam Tomorrow: CS301"
    assert tomorrow.priority == "normal"

    rerun = run_exam_reminders(session, today=EXAM_DAY - timedelta(days=1))
    assert rerun.created == []
    assert rerun.already_sent == 1
    assert NotificationRepository(session).get(day_before.created[0]).send_count == 3


def test_exam_day_reminder_is_urgent_and_expires_after_the_exam(
    session, make_user, exam
) -> None:
    make_user(branch_id="CSE", semester=3)

    run = run_exam_reminders(session, today=EXAM_DAY)

    reminder = NotificationRepository(session).get(run.created[0])
    assert reminder.title == "Exam Today: CS301"
    assert reminder.priority == "high"
    assert reminder.metadata["days_until"] == 0
    assert reminder.expires_at is not None
    assert reminder.expires_at > reminder.scheduled_for


def test_past_exams_are_ignored(session, make_user, exam) -> None:
    make_user(branch_id="CSE", semester=3)

    run = run_exam_reminders(session, today=EXAM_DAY + timedelta(days=1))

    assert run.created == []


def test_custom_offsets(session, make_user, exam) -> None:
    make_user(branch_id="CSE", semester=3)

    run = run_exam_reminders(
        session, today=EXAM_DAY - timedelta(days=3), offsets=[3]
    )

    reminder = NotificationRepository(session).get(run.created[0])
    assert reminder.title == "Exam in 3 Days: CS301"
    assert reminder.priority == "normal"


def test_week_reminder_respects_preferences(session, make_user, exam) -> None:
    keen = make_user(branch_id="CSE", semester=3)
    muted = make_user(branch_id="CSE", semester=3)
    update_preferences(session, user_id=muted.id, exam_reminder_1_week=False)

    week = run_exam_reminders(session, today=EXAM_DAY - timedelta(days=7))
    day = run_exam_reminders(session, today=EXAM_DAY - timedelta(days=1))

    deliveries = DeliveryRepository(session)
    assert deliveries.list_user_ids(week.created[0]) == {keen.id}
    assert deliveries.list_user_ids(day.created[0]) == {keen.id, muted.id}


def test_failure_for_one_exam_does_not_stop_the_sweep(
    session, make_user, exam, monkeypatch
) -> None:
    make_user(branch_id="CSE", semester=3)
    ExamRepository(session).create(
        Exam(
            id=None,
            subject_name="Operating Systems",
            subject_code="CS302",
            exam_type="Mid-term",
            branch_id="CSE",
            semester=3,
            exam_date=EXAM_DAY,
        )
    )
    original = exam_reminders.publish_or_resume

    def flaky(session, **fields):
        if fields["metadata"]["exam_id"] == exam.id:
            raise RuntimeError("database hiccup")
        return original(session, **fields)

    monkeypatch.setattr(exam_reminders, "publish_or_resume", flaky)

    run = run_exam_reminders(session, today=EXAM_DAY)

    assert run.failed == 1
    assert len(run.created) == 1
