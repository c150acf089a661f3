"""Health check endpoints.

Provides endpoints for monitoring service health and readiness.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from modefilter.catalog.store import EntryStore
from modefilter.domain.exceptions import BackendUnavailableError
from modefilter.infrastructure.config import settings
from modefilter.infrastructure.stores import get_entry_store

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    service: str
    version: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Check service health.

    Returns:
        Health status with service name and version.
    """
    return HealthResponse(
        status="healthy",
        service="modefilter-api",
        version=settings.api_version,
    )


@router.get("/ready")
async def readiness_check(
    store: Annotated[EntryStore, Depends(get_entry_store)],
) -> JSONResponse:
    """Check if service is ready to accept requests.

    Returns:
        Readiness status; 503 while the entry store is unreachable.
    """
    try:
        await store.ping()
    except BackendUnavailableError:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unavailable", "store": settings.store_backend},
        )
    return JSONResponse(content={"status": "ready", "store": settings.store_backend})
