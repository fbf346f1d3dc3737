"""FastAPI dependency utilities."""

from fastapi import HTTPException, status
from fastapi.requests import HTTPConnection

from lifestream.application.services import ApplicationServices
from lifestream.infrastructure.openai_client import (
    EventExtractionService,
    OpenAIConfigurationError,
)


def get_services(connection: HTTPConnection) -> ApplicationServices:
    """Return the services built by the application lifespan."""

    services = getattr(connection.app.state, "services", None)
    if services is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="The calendar service is still starting",
        )
    return services


def get_event_extraction_service() -> EventExtractionService:
    """Return a configured instance of :class:`EventExtractionService`."""

    try:
        return EventExtractionService()
    except OpenAIConfigurationError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc
