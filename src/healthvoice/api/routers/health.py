"""
Health check endpoints.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Request
from pydantic import BaseModel

from ..deps import ContainerDep
from ..schemas.common import ApiResponse
from ..utils.responses import ok
from ...core.container import ServiceNames

router = APIRouter(prefix="/health", tags=["health"])


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    timestamp: datetime
    version: str
    service: str


@router.get("", response_model=ApiResponse[HealthResponse])
async def health_check(request: Request, container: ContainerDep):
    """
    Health check endpoint.

    Returns the current status of the service.
    """
    settings = container.settings
    return ok(request, data=HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version=settings.app_version,
        service=settings.app_name,
    ), message="OK")


@router.get("/ready", response_model=ApiResponse[dict])
async def readiness_check(request: Request, container: ContainerDep):
    """
    Readiness check endpoint.

    Reports the appointment store and whether inference is configured.
    """
    settings = container.settings
    checks = {}
    all_ok = True

    try:
        appointments = container.get(ServiceNames.APPOINTMENT_REPOSITORY)
        await appointments.find_by_id("appt-readiness-check")
        checks["appointment_store"] = f"ok ({settings.database.backend})"
    except Exception as e:
        checks["appointment_store"] = f"error: {str(e)[:50]}"
        all_ok = False

    checks["azure_openai"] = "configured" if settings.azure_openai.is_configured else "not_configured"

    return ok(
        request,
        data={"ready": all_ok, "checks": checks},
        message="READY" if all_ok else "NOT_READY",
    )
