"""Payloads of the domain events raised by the catalog/CRUD layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime


@dataclass(frozen=True)
class PublishedEvent:
    """A campus event that has just been published."""

    id: str
    title: str
    event_date: date | None = None
    venue: str | None = None
    target_branches: tuple[str, ...] = ()
    target_semesters: tuple[int, ...] = ()
    target_years: tuple[int, ...] = ()


@dataclass(frozen=True)
class PublishedOpportunity:
    """An internship, job or similar opportunity that has just been published."""

    id: str
    title: str
    opportunity_type: str = "opportunity"
    company_name: str | None = None
    deadline: datetime | None = None
    target_branches: tuple[str, ...] = ()
    target_semesters: tuple[int, ...] = ()
    target_years: tuple[int, ...] = ()


@dataclass(frozen=True)
class TimetableChange:
    """A timetable entry of one branch and semester was modified."""

    id: str
    branch_id: str
    semester: int
    day_of_week: str | None = None
    subject_name: str | None = None


@dataclass(frozen=True)
class RegisteredUser:
    """A user account that has just been created."""

    id: int
    name: str
    extra: dict = field(default_factory=dict)


__all__ = [
    "PublishedEvent",
    "PublishedOpportunity",
    "TimetableChange",
    "RegisteredUser",
]
