"""
API routers module.

This module contains all API route definitions organized by remote service.
"""
from records_svc.api.routers.health import router as health_router
from records_svc.api.routers.patients import router as patients_router
from records_svc.api.routers.prescriptions import (
    router as prescriptions_router,
    search_router,
)

__all__ = ["health_router", "patients_router", "prescriptions_router", "search_router"]
