"""
Health check endpoints.
Simple endpoints for monitoring application health and status.
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from visionchat import __version__
from visionchat.config.settings import Settings, get_settings

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    timestamp: datetime
    version: str
    environment: str


class DetailedHealthResponse(HealthResponse):
    """Detailed health check response model."""

    services: dict
    model: str


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_settings)):
    """Basic health check endpoint."""
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc),
        version=__version__,
        environment=settings.environment,
    )


@router.get("/health/detailed", response_model=DetailedHealthResponse)
async def detailed_health_check(settings: Settings = Depends(get_settings)):
    """Detailed health check with upstream configuration status."""
    # Configuration only; the upstream is not called
    services = {
        "completion_api": "ok" if settings.openai_api_key else "not_configured",
        "contact_email": "ok" if settings.contact_email else "not_configured",
    }

    return DetailedHealthResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc),
        version=__version__,
        environment=settings.environment,
        services=services,
        model=settings.openai_model,
    )
