# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Provides health check endpoints for monitoring and load balancers.
# =============================================================================

from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from app.config import settings
from app.dependencies import CatalogDep

router = APIRouter()

API_VERSION = "1.0.0"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# =============================================================================
# Response Models
# =============================================================================

class HealthResponse(BaseModel):
    """Basic health check response."""
    status: str
    timestamp: str
    environment: str
    version: str


class ChecksResponse(BaseModel):
    """Individual store checks."""
    record_store: str
    photo_store: str


class ReadinessResponse(BaseModel):
    """Readiness check response."""
    status: str
    checks: ChecksResponse
    timestamp: str


class LivenessResponse(BaseModel):
    """Liveness check response."""
    status: str
    timestamp: str


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/", response_class=PlainTextResponse, include_in_schema=False)
def root():
    """Plain-text banner confirming the API is up."""
    return "Catalog API running"


@router.get("/health", response_model=HealthResponse)
def health_check():
    """
    Health check endpoint.

    Returns basic health status for load balancers and monitoring.
    """
    return HealthResponse(
        status="healthy",
        timestamp=_now(),
        environment=settings.ENVIRONMENT,
        version=API_VERSION,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
def readiness_check(catalog: CatalogDep):
    """
    Readiness check endpoint.

    Checks the record store and that the uploads directory exists.
    """
    results = catalog.is_ready()

    checks = ChecksResponse(
        record_store="healthy" if results["record_store"] else "unhealthy",
        photo_store="healthy" if results["photo_store"] else "unhealthy",
    )

    return ReadinessResponse(
        status="ready" if all(results.values()) else "degraded",
        checks=checks,
        timestamp=_now(),
    )


@router.get("/health/live", response_model=LivenessResponse)
def liveness_check():
    """
    Liveness check endpoint.

    Returns whether the service process is alive.
    """
    return LivenessResponse(
        status="alive",
        timestamp=_now(),
    )
