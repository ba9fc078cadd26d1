"""Health & Readiness Probes — liveness and readiness for the template service.

Invariants:
    - GET /api/v1/health/ answers 200 whenever the process is serving
    - GET /api/v1/health/ready answers 503 until the database round-trips
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from fleetconfig.config import get_settings
import fleetconfig.infrastructure.database as db_module

router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    settings = get_settings()
    return {
        "status": "healthy",
        "service": settings.service_name,
        "version": settings.service_version,
    }


@router.get("/ready")
async def readiness_check():
    """Readiness includes database connectivity; db_manager is read at call time."""
    manager = db_module.db_manager
    database_ok = manager is not None and await manager.health_check()
    if not database_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "checks": {"database": "unavailable"}},
        )
    return {"status": "ready", "checks": {"database": "healthy"}}
