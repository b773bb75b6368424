"""Run the exam reminder sweep once; meant to be called daily by cron."""

from __future__ import annotations

import argparse
from datetime import date

from sqlalchemy.exc import SQLAlchemyError

from campus_notify.application.use_cases.notifications import run_exam_reminders
from campus_notify.infrastructure.database import SessionLocal, initialize_database


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for the reminder sweep."""

    parser = argparse.ArgumentParser(
        description="Send the exam reminders that fall due on a given day.",
    )
    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        default=None,
        help="Day to evaluate as YYYY-MM-DD (default: today in the app timezone)",
    )
    parser.add_argument(
        "--offset",
        type=int,
        action="append",
        dest="offsets",
        default=None,
        help="Days before the exam to remind at; repeat for several (default: from settings)",
    )
    return parser.parse_args()


def main() -> None:
    """Run the sweep using the provided command line arguments."""

    args = parse_args()
    initialize_database()

    session = SessionLocal()
    try:
        run = run_exam_reminders(session, today=args.date, offsets=args.offsets)
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Could not read the exam schedule: {exc}") from exc
    finally:
        session.close()

    print(
        f"Exam reminders for {run.run_date.isoformat()}:\n"
        f"  Created: {len(run.created)}\n"
        f"  Already sent: {run.already_sent}\n"
        f"  Failed: {run.failed}"
    )
    if run.failed:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
