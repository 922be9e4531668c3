"""
Service layer for patient operations.

This service contains business logic for patient lookups, the paged patient
listing and the multi-table detail update, and orchestrates calls to the
repository.

Architecture:
    API Layer (routers) → PatientService → PatientRepository → Database

Dependency Injection:
    PatientService receives its repository via constructor injection.
    Use records_svc.core.dependencies.get_patient_service() in routers with Depends().
"""
import logging
import sqlite3
from typing import Any, Dict, Optional, Tuple

from records_svc.repositories import PatientRepository
from records_svc.schemas import (
    PatientResponse,
    PatientWithDetails,
    PatientListResponse,
    UpdatePatientDetailsRequest,
    UpdatePatientDetailsResponse,
)
from records_svc.core.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from records_svc.core.exceptions import PatientNotFoundError, DatabaseError

logger = logging.getLogger(__name__)

PATIENT_FIELDS = ("name", "age", "gender", "contact")


def _provided(value: Any) -> Any:
    """Collapse values that mean "not supplied" (None, empty string, zero) to None."""
    return value if value else None


class PatientService:
    """
    Service layer for patient operations.

    Handles paging defaults, partial-update normalization and translation of
    database failures into INTERNAL errors.
    """

    def __init__(
        self,
        patient_repository: PatientRepository,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        max_page_size: int = MAX_PAGE_SIZE,
    ):
        """
        Initialize the patient service.

        Args:
            patient_repository: PatientRepository instance for data access.
            default_page_size: Page size used when the caller gives none.
            max_page_size: Upper bound applied to requested page sizes.
        """
        self._repo = patient_repository
        self._default_page_size = default_page_size
        self._max_page_size = max_page_size

    def get_patient(self, name: str) -> PatientResponse:
        """
        Get a patient by name.

        Raises:
            PatientNotFoundError: If no patient with this name exists.
            DatabaseError: If the query fails.
        """
        try:
            patient = self._repo.get_by_name(name)
        except sqlite3.Error as e:
            logger.error("DB error while fetching patient", exc_info=e)
            raise DatabaseError(operation="get_patient") from e

        if patient is None:
            raise PatientNotFoundError(patient_name=name)

        return PatientResponse(**patient)

    def normalize_paging(self, page: Optional[int], page_size: Optional[int]) -> Tuple[int, int]:
        """
        Apply paging defaults.

        A missing or non-positive page becomes 1, a missing or non-positive
        page size becomes the default, and page sizes above the maximum are capped.
        """
        page = page if page and page > 0 else 1
        page_size = page_size if page_size and page_size > 0 else self._default_page_size
        if page_size > self._max_page_size:
            logger.warning(
                "Requested page size above maximum, capping",
                extra={"requested": page_size, "max_page_size": self._max_page_size}
            )
            page_size = self._max_page_size
        return page, page_size

    def get_all_patients(
        self,
        page: Optional[int] = None,
        page_size: Optional[int] = None
    ) -> PatientListResponse:
        """
        Get one page of patients with their prescription details.

        Every row repeats ``totalCount`` and ``totalPages`` for the whole listing.
        A page past the end is an empty list.

        Raises:
            DatabaseError: If the query fails.
        """
        page, page_size = self.normalize_paging(page, page_size)
        logger.debug("Listing patients", extra={"page": page, "page_size": page_size})

        try:
            result = self._repo.get_page(page=page, page_size=page_size)
        except sqlite3.Error as e:
            logger.error("DB error while listing patients", exc_info=e)
            raise DatabaseError(operation="get_all_patients", reason=str(e)) from e

        total_count = result["total_count"]
        total_pages = -(-total_count // page_size)

        patients = [
            PatientWithDetails(
                **row,
                total_count=total_count,
                total_pages=total_pages,
            )
            for row in result["rows"]
        ]
        logger.debug("Patients fetched", extra={"count": len(patients)})
        return PatientListResponse(patients=patients)

    def update_patient_details(
        self,
        reference_number: str,
        changes: UpdatePatientDetailsRequest
    ) -> UpdatePatientDetailsResponse:
        """
        Update the patient, doctor, medicine and notes linked to a reference.

        Missing, null and empty fields leave stored values unchanged.
        The update is all-or-nothing.

        Raises:
            PatientNotFoundError: If no prescription carries this reference number.
            DatabaseError: If any step of the transaction fails.
        """
        patient_fields: Dict[str, Any] = {
            field: _provided(getattr(changes, field)) for field in PATIENT_FIELDS
        }
        logger.info(
            "Updating patient details",
            extra={
                "reference_number": reference_number,
                "fields": sorted(changes.model_dump(exclude_none=True)),
            }
        )

        try:
            updated = self._repo.update_details(
                reference_number=reference_number,
                patient_fields=patient_fields,
                doctor_name=_provided(changes.doctor_name),
                medicine_name=_provided(changes.medicine_name),
                description=_provided(changes.description),
            )
        except sqlite3.Error as e:
            logger.error("DB error while updating patient details", exc_info=e)
            raise DatabaseError(operation="update_patient_details", reason=str(e)) from e

        if not updated:
            raise PatientNotFoundError(reference_number=reference_number)

        return UpdatePatientDetailsResponse(success=True)
