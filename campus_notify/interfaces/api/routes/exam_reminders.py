"""Manual trigger for the daily exam reminder sweep."""

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from campus_notify.application.use_cases.notifications import run_exam_reminders
from campus_notify.domain.entities import DirectoryUser
from campus_notify.infrastructure.database import get_db
from campus_notify.interfaces.api.dependencies import require_admin
from campus_notify.interfaces.api.schemas import ExamReminderRunRead

router = APIRouter(prefix="/exam-reminders", tags=["exam-reminders"])


@router.post("/run", response_model=ExamReminderRunRead)
def run_reminders(
    today: date | None = Query(
        None, description="Calendar day to evaluate; defaults to today in the app timezone."
    ),
    db: Session = Depends(get_db),
    _: DirectoryUser = Depends(require_admin),
):
    """Send the reminders due on ``today``. Running it again sends nothing new."""

    run = run_exam_reminders(db, today=today)
    return ExamReminderRunRead(
        run_date=run.run_date,
        created=run.created,
        already_sent=run.already_sent,
        failed=run.failed,
    )
