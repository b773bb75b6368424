"""Persistence helpers for the exam schedule."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date

from sqlalchemy.orm import Session

from campus_notify.domain.entities import Exam
from campus_notify.infrastructure.models import ExamModel


class ExamRepository:
    """Read and seed exam schedule entries."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_between(self, start: date, end: date) -> Sequence[Exam]:
        """Return exams dated within ``start``..``end`` (inclusive)."""

        query = (
            self.session.query(ExamModel)
            .filter(ExamModel.exam_date >= start)
            .filter(ExamModel.exam_date <= end)
            .order_by(ExamModel.exam_date, ExamModel.id)
        )
        return [self._to_entity(model) for model in query.all()]

    def create(self, exam: Exam) -> Exam:
        model = ExamModel(
            subject_name=exam.subject_name,
            subject_code=exam.subject_code,
            exam_type=exam.exam_type,
            branch_id=exam.branch_id,
            semester=exam.semester,
            exam_date=exam.exam_date,
            start_time=exam.start_time,
            room_number=exam.room_number,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: ExamModel) -> Exam:
        return Exam(
            id=model.id,
            subject_name=model.subject_name,
            subject_code=model.subject_code,
            exam_type=model.exam_type,
            branch_id=model.branch_id,
            semester=model.semester,
            exam_date=model.exam_date,
            start_time=model.start_time,
            room_number=model.room_number,
        )


__all__ = ["ExamRepository"]
