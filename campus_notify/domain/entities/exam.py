"""Domain entity for an entry of the exam schedule."""

from dataclasses import dataclass
from datetime import date, time


@dataclass
class Exam:
    """A scheduled exam for one branch and semester."""

    id: int | None
    subject_name: str
    subject_code: str
    exam_type: str
    branch_id: str
    semester: int
    exam_date: date
    start_time: time | None = None
    room_number: str | None = None
