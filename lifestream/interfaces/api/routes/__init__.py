from fastapi import FastAPI

from .assistant import router as assistant_router
from .events import router as events_router
from .notifications import router as notifications_router
from .reminders import router as reminders_router
from .settings import router as settings_router


def register_routes(app: FastAPI) -> None:
    """Register every API router on the FastAPI application."""

    app.include_router(events_router)
    app.include_router(assistant_router)
    app.include_router(notifications_router)
    app.include_router(settings_router)
    app.include_router(reminders_router)
