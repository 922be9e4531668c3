"""
Health, readiness, and metrics endpoints for operational visibility.

This module provides:
- /health: Liveness probe (is the app running?)
- /ready: Readiness probe (is the database reachable?)
- /metrics: Prometheus-compatible metrics, /metrics/json for humans

No authentication required (internal/infrastructure use).
"""
import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import PlainTextResponse

from records_svc import __version__
from records_svc.core.dependencies import get_database
from records_svc.core.middleware import get_metrics_collector
from records_svc.repositories import Database
from records_svc.schemas import DependencyStatus, HealthResponse, ReadyResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health & Observability"])


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get("/", include_in_schema=False)
async def root():
    """Basic API information with links to the operational endpoints."""
    return {
        "service": "Records Service",
        "version": __version__,
        "health": "/health",
        "ready": "/ready",
        "metrics": "/metrics",
    }


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness probe",
)
async def health_check() -> HealthResponse:
    """Liveness probe. Returns immediately without touching the database."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        timestamp=_utc_timestamp()
    )


def _check_database(db: Database) -> DependencyStatus:
    """Run a trivial query to verify the database is reachable."""
    start = time.perf_counter()
    try:
        conn = db.get_connection()
        try:
            conn.execute("SELECT 1")
        finally:
            conn.close()

        latency_ms = (time.perf_counter() - start) * 1000
        return DependencyStatus(
            name="database",
            status="ok",
            latency_ms=round(latency_ms, 2),
            message="SQLite connection healthy"
        )
    except Exception as e:
        latency_ms = (time.perf_counter() - start) * 1000
        logger.error("Database health check failed", extra={"error": str(e)})
        return DependencyStatus(
            name="database",
            status="unavailable",
            latency_ms=round(latency_ms, 2),
            message=f"Connection failed: {type(e).__name__}"
        )


@router.get(
    "/ready",
    response_model=ReadyResponse,
    summary="Readiness probe",
    description="Returns 503 when the database is unavailable."
)
async def readiness_check(response: Response, db: Database = Depends(get_database)) -> ReadyResponse:
    """Readiness probe - can the service answer remote calls?"""
    dependencies = [_check_database(db)]

    if all(dep.status == "ok" for dep in dependencies):
        overall = "ready"
    else:
        overall = "not_ready"
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return ReadyResponse(
        status=overall,
        dependencies=dependencies,
        timestamp=_utc_timestamp()
    )


@router.get("/metrics", response_class=PlainTextResponse, summary="Prometheus metrics")
async def metrics() -> str:
    """Metrics in Prometheus text exposition format."""
    return get_metrics_collector().get_prometheus_format()


@router.get("/metrics/json", summary="Metrics as JSON")
async def metrics_json():
    """The same metrics as a JSON object."""
    return get_metrics_collector().get_summary()
