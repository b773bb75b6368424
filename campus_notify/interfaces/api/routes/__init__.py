from fastapi import FastAPI

from .domain_events import router as domain_events_router
from .exam_reminders import router as exam_reminders_router
from .me import router as me_router
from .notifications import router as notifications_router


def register_routes(app: FastAPI) -> None:
    """Register every API router on the FastAPI application."""

    app.include_router(notifications_router)
    app.include_router(me_router)
    app.include_router(domain_events_router)
    app.include_router(exam_reminders_router)
