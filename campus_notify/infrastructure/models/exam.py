"""SQLAlchemy model for the exam schedule."""

from sqlalchemy import Column, Date, Integer, String, Time

from campus_notify.infrastructure.database import Base


class ExamModel(Base):
    """Exam timetable row maintained by the academic CRUD screens."""

    __tablename__ = "exam_schedule"

    id = Column(Integer, primary_key=True, index=True)
    subject_name = Column(String(120), nullable=False)
    subject_code = Column(String(30), nullable=False)
    exam_type = Column(String(50), nullable=False, default="End-term")
    branch_id = Column(String(36), nullable=False, index=True)
    semester = Column(Integer, nullable=False)
    exam_date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=True)
    room_number = Column(String(30), nullable=True)
