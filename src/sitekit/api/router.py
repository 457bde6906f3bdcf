"""Root API router with health and metrics endpoints."""

from typing import Any

import structlog
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel

from sitekit.api.dependencies import AppMetrics, AppSettings, Cache
from sitekit.core.constants import CACHE_READINESS_PROBE_KEY
from sitekit.core.metrics import WebVital


logger = structlog.get_logger()


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str


class ReadinessResponse(BaseModel):
    """Readiness check response schema."""

    status: str
    checks: dict[str, str]


health_router = APIRouter(tags=["health"])


@health_router.get(
    "/health/live",
    response_model=HealthResponse,
    summary="Liveness probe",
    description="Returns 200 if the process is running.",
)
async def liveness() -> HealthResponse:
    """Liveness probe endpoint."""
    return HealthResponse(status="alive")


@health_router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    description="Checks cache connectivity.",
)
async def readiness(cache: Cache) -> JSONResponse:
    """Readiness probe endpoint."""
    checks: dict[str, str] = {}

    try:
        await cache.get(CACHE_READINESS_PROBE_KEY)
        checks["cache"] = "ok"
    except Exception as e:
        logger.warning("readiness_check_failed", check="cache", error=str(e))
        checks["cache"] = str(e)

    all_ok = all(v == "ok" for v in checks.values())

    return JSONResponse(
        status_code=status.HTTP_200_OK
        if all_ok
        else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ready" if all_ok else "degraded",
            "checks": checks,
        },
    )


@health_router.get(
    "/info",
    summary="Application info",
)
async def info(settings: AppSettings, cache: Cache) -> dict[str, Any]:
    """Application metadata."""
    return {
        "app": settings.app_name,
        "environment": settings.environment,
        "cache_backend": type(cache).__name__,
    }


metrics_router = APIRouter(prefix="/metrics", tags=["metrics"])


@metrics_router.get(
    "",
    summary="Prometheus metrics",
    response_class=PlainTextResponse,
)
async def metrics(collector: AppMetrics) -> PlainTextResponse:
    """Expose process and web vital metrics for scraping."""
    return PlainTextResponse(
        collector.get_metrics(), media_type=collector.content_type
    )


@metrics_router.post(
    "/web-vitals",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Record a web vital",
)
async def record_web_vital(metric: WebVital, collector: AppMetrics) -> None:
    """Record a web vital reported by the browser."""
    collector.observe_web_vital(metric)


api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(metrics_router)
