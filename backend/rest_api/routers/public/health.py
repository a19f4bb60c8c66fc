"""
Liveness and dependency health endpoints.
"""

from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text

from shared.config.settings import settings
from shared.infrastructure.db import SessionLocal
from shared.infrastructure.events import check_redis_async_health
from shared.utils.health import HealthStatus, aggregate_health_checks, health_check_with_timeout

SERVICE_NAME = "rest-api"

router = APIRouter(prefix="/api", tags=["health"])


@health_check_with_timeout(timeout=3.0, component="database")
async def check_database_health() -> dict[str, Any]:
    with SessionLocal() as db:
        db.execute(text("SELECT 1"))
        return {"dialect": db.get_bind().dialect.name}


@router.get("/health")
def health_check():
    """Liveness only; dependencies are not touched."""
    return {
        "status": HealthStatus.HEALTHY.value,
        "service": SERVICE_NAME,
        "environment": settings.environment,
    }


@router.get("/health/detailed")
async def detailed_health_check():
    """Database and Redis; 503 when either is down."""
    report = await aggregate_health_checks([check_database_health(), check_redis_async_health()])
    body = {
        "service": SERVICE_NAME,
        "environment": settings.environment,
        "status": report["status"],
        "dependencies": report["components"],
    }
    if report["status"] != HealthStatus.HEALTHY.value:
        return JSONResponse(content=body, status_code=503)
    return body
