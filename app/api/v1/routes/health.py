"""
Liveness and readiness endpoints for the admin API.

Liveness only says the process answers. Readiness checks what a save
needs: the database and a configured image bucket.
"""
import logging
from typing import Dict

from fastapi import APIRouter, HTTPException, Request, status
from pydantic import BaseModel, Field
from sqlalchemy import text

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/health",
    tags=["health"],
)


class HealthResponse(BaseModel):
    """Service status plus the result of each dependency check."""

    status: str
    message: str
    checks: Dict[str, str] = Field(default_factory=dict)


async def check_database(request: Request) -> str:
    async with request.app.state.engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    return "ok"


def check_storage(request: Request) -> str:
    """The gateway cannot store images without a bucket name."""
    storage_service = getattr(request.app.state, "storage_service", None)
    if storage_service is None or not storage_service.bucket_name:
        return "not configured"
    return "ok"


@router.get(
    "",
    response_model=HealthResponse,
    summary="Liveness check",
    description="Answers as long as the process is up. No dependency is contacted.",
    status_code=status.HTTP_200_OK,
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="healthy", message="Store admin API is running")


@router.get(
    "/ready",
    response_model=HealthResponse,
    summary="Readiness check",
    description="Checks the database connection and the image storage configuration.",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Database reachable and storage configured"},
        503: {"description": "A dependency is missing or unreachable"},
    },
)
async def readiness_check(request: Request) -> HealthResponse:
    checks: Dict[str, str] = {}
    try:
        checks["database"] = await check_database(request)
    except Exception as e:
        logger.warning(f"Readiness: database unreachable: {type(e).__name__}: {e}")
        checks["database"] = "unreachable"
    checks["storage"] = check_storage(request)

    failing = sorted(name for name, result in checks.items() if result != "ok")
    if failing:
        logger.warning(f"Readiness failed: {checks}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Not ready: {', '.join(failing)}",
        )
    return HealthResponse(status="ready", message="Ready to serve admin requests", checks=checks)
