"""Payloads posted by the CRUD layer when a domain event happens."""

from datetime import date, datetime

from pydantic import BaseModel, Field


class EventPublishedPayload(BaseModel):
    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    event_date: date | None = None
    venue: str | None = None
    target_branches: list[str] = Field(default_factory=list)
    target_semesters: list[int] = Field(default_factory=list)
    target_years: list[int] = Field(default_factory=list)


class OpportunityPublishedPayload(BaseModel):
    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    type: str = "opportunity"
    company_name: str | None = None
    deadline: datetime | None = None
    target_branches: list[str] = Field(default_factory=list)
    target_semesters: list[int] = Field(default_factory=list)
    target_years: list[int] = Field(default_factory=list)


class TimetableChangedPayload(BaseModel):
    id: str = Field(..., min_length=1)
    branch_id: str = Field(..., min_length=1)
    semester: int = Field(..., ge=1)
    day_of_week: str | None = None
    subject_name: str | None = None


class UserRegisteredPayload(BaseModel):
    id: int
    name: str = Field(..., min_length=1)


class DomainEventAccepted(BaseModel):
    """The bridge ran; ``notification_id`` is ``null`` when delivery failed."""

    notification_id: int | None = None


class ExamReminderRunRead(BaseModel):
    run_date: date
    created: list[int]
    already_sent: int
    failed: int
