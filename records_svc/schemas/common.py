"""
Shared wire types for the Records Service.
"""
from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class StatusCode(str, Enum):
    """Status codes carried by every error reply."""

    NOT_FOUND = "NOT_FOUND"
    INTERNAL = "INTERNAL"


class ErrorResponse(BaseModel):
    """Body of every non-2xx reply produced by the service."""

    code: StatusCode = Field(..., description="Error status code", examples=["NOT_FOUND"])
    detail: str = Field(..., description="Human-readable error message", examples=["Prescription not found"])


class HealthResponse(BaseModel):
    """Response model for /health endpoint."""
    status: str  # "healthy"
    version: str
    timestamp: str  # ISO 8601 UTC


class DependencyStatus(BaseModel):
    """Status of a single dependency."""
    name: str
    status: str  # "ok" or "unavailable"
    latency_ms: float | None = None
    message: str | None = None


class ReadyResponse(BaseModel):
    """Response model for /ready endpoint."""
    status: str  # "ready" or "not_ready"
    dependencies: List[DependencyStatus]
    timestamp: str
