"""Exam reminder sweep.

The sweep has no timer of its own: an external caller runs it (typically
once a day) and it works out which reminders are due on that calendar day.
Running it several times on the same day is harmless because every
(exam, offset) reminder carries a unique deduplication key.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from sqlalchemy.orm import Session

from campus_notify.config import get_settings
from campus_notify.domain.entities import (
    NOTIFICATION_TYPE_EXAM_REMINDER,
    PRIORITY_HIGH,
    PRIORITY_LOW,
    PRIORITY_NORMAL,
    Exam,
    TargetingSpec,
)
from campus_notify.infrastructure.repositories import ExamRepository
from campus_notify.utils import now_utc, today_in_app_timezone

from .create_notification import exam_reminder_key
from .events import start_of_day
from .fan_out import publish_or_resume

logger = logging.getLogger(__name__)


@dataclass
class ExamReminderRun:
    """Summary of one sweep."""

    run_date: date
    created: list[int] = field(default_factory=list)
    already_sent: int = 0
    failed: int = 0


def reminder_priority(offset_days: int) -> str:
    if offset_days >= 7:
        return PRIORITY_LOW
    if offset_days >= 1:
        return PRIORITY_NORMAL
    return PRIORITY_HIGH


def _reminder_title(exam: Exam, offset_days: int) -> str:
    if offset_days == 0:
        return f"Exam Today: {exam.subject_code}"
    if offset_days == 1:
        return f"Exam Tomorrow: {exam.subject_code}"
    if offset_days == 7:
        return f"Exam in 1 Week: {exam.subject_code}"
    return f"Exam in {offset_days} Days: {exam.subject_code}"


def _reminder_message(exam: Exam, offset_days: int) -> str:
    when = exam.exam_date.isoformat()
    if exam.start_time is not None:
        when = f"{when} at {exam.start_time.strftime('%H:%M')}"
    room = exam.room_number or "TBA"
    if offset_days == 0:
        return (
            f"Your {exam.exam_type} exam for {exam.subject_name} is TODAY ({when}). "
            f"Room: {room}. Good luck!"
        )
    if offset_days == 1:
        return (
            f"REMINDER: Your {exam.exam_type} exam for {exam.subject_name} is "
            f"TOMORROW ({when}). Room: {room}. Good luck!"
        )
    return (
        f"Your {exam.exam_type} exam for {exam.subject_name} is scheduled for "
        f"{when}. Start preparing now!"
    )


def due_offsets(exam: Exam, today: date, offsets: Sequence[int]) -> list[int]:
    """Return the offsets whose reminder day for ``exam`` is ``today``."""

    return [
        offset
        for offset in offsets
        if exam.exam_date - timedelta(days=offset) == today
    ]


def run_exam_reminders(
    session: Session,
    *,
    today: date | None = None,
    now: datetime | None = None,
    offsets: Sequence[int] | None = None,
) -> ExamReminderRun:
    """Issue every exam reminder that falls due on ``today``.

    ``today`` defaults to the current calendar day in the application
    timezone; when only ``today`` is given, reminders are stamped at its
    midnight. Failures for one (exam, offset) pair are logged and do not stop
    the sweep.
    """

    if now is None:
        now = start_of_day(today) if today is not None else now_utc()
    today = today or today_in_app_timezone(now)
    if offsets is None:
        offsets = get_settings().exam_reminder_offsets
    offsets = sorted(set(offsets), reverse=True)
    run = ExamReminderRun(run_date=today)
    if not offsets:
        return run

    exams = ExamRepository(session).list_between(today, today + timedelta(days=max(offsets)))
    for exam in exams:
        for offset in due_offsets(exam, today, offsets):
            try:
                notification, created = publish_or_resume(
                    session,
                    title=_reminder_title(exam, offset),
                    message=_reminder_message(exam, offset),
                    notification_type=NOTIFICATION_TYPE_EXAM_REMINDER,
                    priority=reminder_priority(offset),
                    targeting=TargetingSpec.build(
                        branch_ids=[exam.branch_id], semesters=[exam.semester]
                    ),
                    scheduled_for=now,
                    expires_at=start_of_day(exam.exam_date + timedelta(days=1)),
                    related_resource_type="exam",
                    related_resource_id=exam.id,
                    metadata={
                        "exam_id": exam.id,
                        "subject": exam.subject_name,
                        "exam_date": exam.exam_date.isoformat(),
                        "days_until": offset,
                    },
                    dedup_key=exam_reminder_key(exam.id, offset),
                )
            except Exception:
                session.rollback()
                run.failed += 1
                logger.exception(
                    "Could not send the %s-day reminder for exam %s", offset, exam.id
                )
                continue

            if created:
                run.created.append(notification.id)
            else:
                run.already_sent += 1

    logger.info(
        "Exam reminder sweep for %s: %s created, %s already sent, %s failed",
        today.isoformat(),
        len(run.created),
        run.already_sent,
        run.failed,
    )
    return run


__all__ = ["ExamReminderRun", "due_offsets", "reminder_priority", "run_exam_reminders"]
