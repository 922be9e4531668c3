"""
Service layer for prescription lookups and reference search.

Architecture:
    API Layer (routers) → PrescriptionService → PrescriptionRepository → Database
"""
import logging
import sqlite3

from records_svc.repositories import PrescriptionRepository
from records_svc.schemas import PrescriptionResponse, ReferenceSearchResponse
from records_svc.core.exceptions import (
    PrescriptionNotFoundError,
    ReferenceNotFoundError,
    DatabaseError,
)

logger = logging.getLogger(__name__)


class PrescriptionService:
    """Business logic for reading prescriptions by reference number."""

    def __init__(self, prescription_repository: PrescriptionRepository):
        self._repo = prescription_repository

    def get_prescription(self, reference_number: str) -> PrescriptionResponse:
        """
        Get the prescription carrying a reference number.

        Raises:
            PrescriptionNotFoundError: If no prescription matches.
            DatabaseError: If the query fails.
        """
        try:
            prescription = self._repo.get_by_reference(reference_number)
        except sqlite3.Error as e:
            logger.error("DB error while fetching prescription", exc_info=e)
            raise DatabaseError(operation="get_prescription") from e

        if prescription is None:
            logger.warning(
                "No prescription found",
                extra={"reference_number": reference_number}
            )
            raise PrescriptionNotFoundError(reference_number=reference_number)

        return PrescriptionResponse(**prescription)

    def search_references(self, text: str) -> ReferenceSearchResponse:
        """
        Find every reference number containing ``text``.

        Raises:
            ReferenceNotFoundError: If nothing matches.
            DatabaseError: If the query fails.
        """
        try:
            references = self._repo.search_references(text)
        except sqlite3.Error as e:
            logger.error("DB error while searching references", exc_info=e)
            raise DatabaseError(operation="get_reference") from e

        if not references:
            raise ReferenceNotFoundError(pattern=text)

        return ReferenceSearchResponse(reference=references)
