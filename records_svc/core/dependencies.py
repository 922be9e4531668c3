"""
FastAPI Dependency Injection configuration for the Records Service.

Architecture Flow:
    API Layer (Routers)
         ↓ Depends()
    Service Layer (Business Logic)
         ↓ Injected
    Repository Layer (Data Access)
         ↓ Injected
    Database (SQLite Connection)

Usage in Routers:
    from records_svc.core.dependencies import get_patient_service

    @router.get("/lookup")
    async def get_patient(
        name: str = Query(...),
        patient_service: PatientService = Depends(get_patient_service)
    ):
        return patient_service.get_patient(name)

Testing:
    # Override dependencies in tests
    app.dependency_overrides[get_database] = lambda: test_database
"""
import logging
from typing import Optional, TYPE_CHECKING

from records_svc.core.config import settings

if TYPE_CHECKING:
    from records_svc.repositories import Database, PatientRepository, PrescriptionRepository
    from records_svc.services import PatientService, PrescriptionService

logger = logging.getLogger(__name__)


# =============================================================================
# DATABASE DEPENDENCY
# =============================================================================

_database_instance: Optional["Database"] = None


def get_database() -> "Database":
    """
    Get the database instance (created once, then reused).

    Returns:
        Database: The configured database instance.

    Note:
        Import here to avoid circular imports with repositories.
    """
    global _database_instance

    if _database_instance is None:
        from records_svc.repositories.base import Database

        logger.info(f"Initializing database: {settings.database_path}")
        _database_instance = Database(
            db_path=settings.database_path,
            busy_timeout=settings.records_svc_db_busy_timeout
        )
        logger.info("Database initialized successfully")

    return _database_instance


def reset_database() -> None:
    """Reset the database instance (for testing only)."""
    global _database_instance
    _database_instance = None


# =============================================================================
# REPOSITORY DEPENDENCIES
# =============================================================================

def get_patient_repository() -> "PatientRepository":
    """Get a PatientRepository instance with database injected."""
    from records_svc.repositories import PatientRepository

    return PatientRepository(db=get_database())


def get_prescription_repository() -> "PrescriptionRepository":
    """Get a PrescriptionRepository instance with database injected."""
    from records_svc.repositories import PrescriptionRepository

    return PrescriptionRepository(db=get_database())


# =============================================================================
# SERVICE DEPENDENCIES
# =============================================================================

def get_patient_service() -> "PatientService":
    """
    Get a PatientService instance with repository injected.

    Paging limits come from settings.
    """
    from records_svc.services import PatientService

    return PatientService(
        patient_repository=get_patient_repository(),
        default_page_size=settings.records_svc_default_page_size,
        max_page_size=settings.records_svc_max_page_size,
    )


def get_prescription_service() -> "PrescriptionService":
    """Get a PrescriptionService instance with repository injected."""
    from records_svc.services import PrescriptionService

    return PrescriptionService(prescription_repository=get_prescription_repository())
