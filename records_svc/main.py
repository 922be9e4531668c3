"""
FastAPI application entry point for the Records Service.

The Records Service is the data tier behind the prescription BFF. It answers
typed remote calls (pydantic request/response models over HTTP+JSON) by
running parameterized SQL against one SQLite database.

Architecture Overview:
    ┌─────────────────────────────────────────────────────────────┐
    │                     FastAPI Application                      │
    ├─────────────────────────────────────────────────────────────┤
    │  Middleware                                                  │
    │    └── LoggingMiddleware  - Request logging & metrics       │
    ├─────────────────────────────────────────────────────────────┤
    │  Routers (api/routers/)                                     │
    │    ├── health.py        - /health, /ready, /metrics         │
    │    ├── patients.py      - GetPatient, GetAllPatients        │
    │    └── prescriptions.py - GetPrescription, GetReference,    │
    │                           UpdatePatientDetails              │
    ├─────────────────────────────────────────────────────────────┤
    │  Services (services/)     ← Injected via Depends()          │
    │    ├── PatientService                                        │
    │    └── PrescriptionService                                   │
    ├─────────────────────────────────────────────────────────────┤
    │  Repositories (repositories/)   ← Injected into Services    │
    │    ├── PatientRepository                                     │
    │    └── PrescriptionRepository                                │
    ├─────────────────────────────────────────────────────────────┤
    │  Database (SQLite)              ← Injected into Repositories│
    └─────────────────────────────────────────────────────────────┘

Errors leave the service as ``{"code": "NOT_FOUND" | "INTERNAL", "detail": ...}``.
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
import uvicorn

from records_svc import __version__
from records_svc.core.config import API_HOST, API_PORT, API_RELOAD
from records_svc.core.dependencies import get_database
from records_svc.core.exceptions import setup_exception_handlers
from records_svc.core.logging_config import setup_logging
from records_svc.core.middleware import LoggingMiddleware
from records_svc.api.routers import (
    health_router,
    patients_router,
    prescriptions_router,
    search_router,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: configure logging, then open the database (creates the schema).
    Shutdown: log only; connections are per-call.
    """
    setup_logging(level="INFO", json_format=True)

    logger = logging.getLogger(__name__)
    logger.info("Starting Records Service...")

    db = get_database()
    logger.info(
        "Database initialized",
        extra={"db_path": db.db_path}
    )

    yield

    logger.info("Records Service shutting down...")


def create_app() -> FastAPI:
    """Build the FastAPI application with handlers, middleware and routers."""
    app = FastAPI(
        title="Records Service",
        description="Data tier for patient, prescription and reference-search records.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan
    )

    setup_exception_handlers(app)
    app.add_middleware(LoggingMiddleware)

    app.include_router(health_router)
    app.include_router(patients_router)
    app.include_router(prescriptions_router)
    app.include_router(search_router)

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    uvicorn.run(
        "records_svc.main:app",
        host=API_HOST,
        port=API_PORT,
        reload=API_RELOAD
    )


if __name__ == "__main__":
    run()
