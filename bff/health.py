"""
Liveness and readiness endpoints for the BFF.

/ready reports the Records Service as its only dependency.
"""
import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Response, status

from bff import __version__
from bff.clients.records_client import RecordsServiceCallError, RecordsServiceClient, get_records_client
from records_svc.schemas import DependencyStatus, HealthResponse, ReadyResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@router.get("/health", response_model=HealthResponse, summary="Liveness probe")
async def health_check() -> HealthResponse:
    return HealthResponse(status="healthy", version=__version__, timestamp=_utc_timestamp())


async def _check_records_service(client: RecordsServiceClient) -> DependencyStatus:
    """Call the Records Service /health endpoint."""
    start = time.perf_counter()
    try:
        await client.check_health()
    except RecordsServiceCallError as e:
        latency_ms = (time.perf_counter() - start) * 1000
        logger.error("Records Service health check failed", extra={"error": e.message})
        return DependencyStatus(
            name="records_service",
            status="unavailable",
            latency_ms=round(latency_ms, 2),
            message=e.message
        )

    latency_ms = (time.perf_counter() - start) * 1000
    return DependencyStatus(
        name="records_service",
        status="ok",
        latency_ms=round(latency_ms, 2),
        message=f"Reachable at {client.base_url}"
    )


@router.get(
    "/ready",
    response_model=ReadyResponse,
    summary="Readiness probe",
    description="Returns 503 when the Records Service is unreachable."
)
async def readiness_check(
    response: Response,
    client: RecordsServiceClient = Depends(get_records_client),
) -> ReadyResponse:
    dependencies = [await _check_records_service(client)]

    if all(dep.status == "ok" for dep in dependencies):
        overall = "ready"
    else:
        overall = "not_ready"
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return ReadyResponse(status=overall, dependencies=dependencies, timestamp=_utc_timestamp())
