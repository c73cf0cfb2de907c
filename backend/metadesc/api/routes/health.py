"""
Health check endpoints.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from metadesc.core.config import settings
from metadesc.db.database import check_database_health

router = APIRouter()


@router.get("/api/health")
async def health_check() -> dict:
    """Basic liveness check."""
    return {"status": "healthy", "version": settings.app_version}


@router.get("/api/ready")
async def readiness_check() -> JSONResponse:
    """Readiness check - includes database connectivity."""
    database_ok = await check_database_health()
    return JSONResponse(
        status_code=200 if database_ok else 503,
        content={
            "status": "ready" if database_ok else "not_ready",
            "database": "connected" if database_ok else "unavailable",
        },
    )
