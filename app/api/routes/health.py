"""Health check endpoints for monitoring system status."""
import time
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.settings import get_settings
from app.core.logging import get_logger
from app.db.database import get_db

router = APIRouter(prefix="/health", tags=["health"])
settings = get_settings()
logger = get_logger(__name__)


class HealthCheckResponse(BaseModel):
    """Complete health check response."""

    status: str = Field(..., description="Overall status: healthy or unhealthy")
    app: str = Field(..., description="Application name")
    timestamp: str = Field(..., description="ISO 8601 timestamp of check")
    database_response_time_ms: float | None = Field(None, description="Table backend round trip")


async def check_database(db: AsyncSession) -> tuple[bool, float]:
    """Run ``SELECT 1`` against the table backend."""
    start_time = time.time()
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error("health_database_unreachable", error=str(e))
        return False, 0
    return True, (time.time() - start_time) * 1000


@router.get("", response_model=HealthCheckResponse)
async def health_check(db: AsyncSession = Depends(get_db)):
    """
    Public health check endpoint.

    Used by load balancers and monitoring systems; requires no authentication.
    """
    healthy, response_time = await check_database(db)
    return HealthCheckResponse(
        status="healthy" if healthy else "unhealthy",
        app=settings.app_name,
        timestamp=datetime.utcnow().isoformat(),
        database_response_time_ms=round(response_time, 2) if healthy else None,
    )


@router.get("/liveness")
async def liveness_check():
    """Kubernetes liveness probe endpoint."""
    return {"status": "alive"}


@router.get("/readiness")
async def readiness_check(db: AsyncSession = Depends(get_db)):
    """
    Kubernetes readiness probe endpoint.

    Returns 503 while the table backend is unreachable.
    """
    healthy, _ = await check_database(db)
    if not healthy:
        raise HTTPException(status_code=503, detail="Database not ready")
    return {"status": "ready"}
